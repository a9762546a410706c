"""Repository seam between the pure ledger/due engine and storage."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

from .compliance import ComplianceRecord
from .errors import MissingReferenceError
from .flight_log import FlightLogEntry
from .loader import load_aircraft_record, save_compliance, save_flight_log
from .record import AircraftRecord
from .snapshot import UsageSnapshot


class FleetRepository(ABC):
    """
    Storage for aircraft records.

    Implementations must serialize writers per aircraft; two concurrent
    appends to the same aircraft would otherwise lose one update.
    """

    @abstractmethod
    def list_ids(self) -> List[str]:
        """Ids of all stored aircraft."""

    @abstractmethod
    def load(self, aircraft_id: str) -> AircraftRecord:
        """Load an aircraft with its ledger replayed."""

    @abstractmethod
    def log_flight(self, aircraft_id: str, entry: FlightLogEntry) -> UsageSnapshot:
        """Append a flight log entry and persist the replayed state."""

    @abstractmethod
    def mark_done(
        self,
        aircraft_id: str,
        item_id: str,
        on: Optional[str] = None,
        remark: Optional[str] = None,
    ) -> List[ComplianceRecord]:
        """Record compliance for an item at the aircraft's current usage."""


class YamlFleetRepository(FleetRepository):
    """One YAML file per aircraft in a data directory, named <id>.yaml."""

    def __init__(self, directory: Union[str, Path], suffix: str = ".yaml"):
        self.directory = Path(directory)
        self.suffix = suffix

    def path_for(self, aircraft_id: str) -> Path:
        """Get full path for an aircraft id."""
        return self.directory / f"{aircraft_id}{self.suffix}"

    def _existing_path(self, aircraft_id: str) -> Path:
        path = self.path_for(aircraft_id)
        if not path.exists():
            raise MissingReferenceError(f"Aircraft '{aircraft_id}' not found")
        return path

    def list_ids(self) -> List[str]:
        return sorted(p.stem for p in self.directory.glob(f"*{self.suffix}"))

    def load(self, aircraft_id: str) -> AircraftRecord:
        return load_aircraft_record(self._existing_path(aircraft_id))

    def log_flight(self, aircraft_id: str, entry: FlightLogEntry) -> UsageSnapshot:
        path = self._existing_path(aircraft_id)
        record = load_aircraft_record(path)
        return save_flight_log(path, record, entry)

    def mark_done(
        self,
        aircraft_id: str,
        item_id: str,
        on: Optional[str] = None,
        remark: Optional[str] = None,
    ) -> List[ComplianceRecord]:
        path = self._existing_path(aircraft_id)
        record = load_aircraft_record(path)
        records = record.mark_done(item_id, on, remark)
        save_compliance(path, records)
        return records
