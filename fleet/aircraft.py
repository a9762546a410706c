"""Aircraft and assembly (engine/propeller) records."""

from typing import Optional

from .snapshot import UsageSnapshot, round_hrs


class Aircraft:
    """Aircraft identity plus the live usage state written by ledger replay."""

    def __init__(
        self,
        id: str,
        registration: str,
        type: str,
        msn: Optional[str] = None,
        avg_daily_hrs: Optional[float] = None,
        avg_daily_cyc: Optional[float] = None,
        current_hrs: float = 0.0,
        current_cyc: int = 0,
        current_date: Optional[str] = None,
    ):
        self.id = id
        self.registration = registration
        self.type = type
        self.msn = msn
        self.avg_daily_hrs = avg_daily_hrs or 0.0
        self.avg_daily_cyc = avg_daily_cyc or 0.0
        self.current_hrs = current_hrs or 0.0
        self.current_cyc = current_cyc or 0
        self.current_date = current_date
        self.cofa_hours: Optional[float] = None
        self.hours_to_check: Optional[float] = None
        self.usage: Optional[UsageSnapshot] = None

    @property
    def name(self) -> str:
        """Human-readable aircraft name."""
        return f"{self.registration} ({self.type})"

    def apply_snapshot(self, snapshot: UsageSnapshot) -> None:
        """Set the live fields from the latest ledger snapshot."""
        self.usage = snapshot
        self.current_hrs = snapshot.aircraft_hrs
        self.current_cyc = snapshot.aircraft_cyc
        self.current_date = snapshot.as_of
        self.cofa_hours = snapshot.cofa_hours
        self.hours_to_check = snapshot.hours_to_check


class Assembly:
    """An engine, propeller or APU fitted to one aircraft."""

    TRACKED_TYPES = ("Engine", "Propeller")

    def __init__(
        self,
        id: str,
        aircraft_id: str,
        type: str,
        model: str,
        serial: str,
        position: str = "C",
        tsn_hrs: float = 0.0,
        csn: int = 0,
        tso_hrs: Optional[float] = None,
        cso: Optional[int] = None,
        tbo_hrs: Optional[float] = None,
    ):
        self.id = id
        self.aircraft_id = aircraft_id
        self.type = type
        self.model = model
        self.serial = serial
        self.position = position
        self.tsn_hrs = tsn_hrs or 0.0
        self.csn = csn or 0
        self.tso_hrs = tso_hrs
        self.cso = cso
        self.tbo_hrs = tbo_hrs

    @property
    def is_tracked(self) -> bool:
        """Engines and propellers follow aircraft usage; APUs do not."""
        return self.type in self.TRACKED_TYPES

    @property
    def hours_to_tbo(self) -> Optional[float]:
        if self.tbo_hrs is None:
            return None
        return self.tbo_hrs - (self.tso_hrs or 0.0)

    def rederive(self, aircraft: Aircraft) -> None:
        """Recompute TSN/CSN from aircraft totals less time since overhaul."""
        if not self.is_tracked:
            return
        self.tsn_hrs = round_hrs(aircraft.current_hrs - (self.tso_hrs or 0.0))
        self.csn = aircraft.current_cyc - (self.cso or 0)
