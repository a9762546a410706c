"""Usage counters as of a point in the flight log."""

from dataclasses import dataclass, replace
from typing import Any, Optional

# Block hours are logged to a tenth; two places keeps float drift out of
# long ledgers without hiding real values.
HOURS_PRECISION = 2


def round_hrs(value: float) -> float:
    return round(value, HOURS_PRECISION)


@dataclass(frozen=True)
class UsageSnapshot:
    """Cumulative aircraft, engine and propeller counters at a date."""

    as_of: str
    aircraft_hrs: float
    aircraft_cyc: int
    cofa_hours: float
    hours_to_check: float
    engine_tsn_hrs: float = 0.0
    engine_csn: int = 0
    engine_tso_hrs: float = 0.0
    engine_cso: int = 0
    engine_hrs_to_overhaul: Optional[float] = None
    prop_tsn_hrs: float = 0.0
    prop_csn: int = 0
    prop_tso_hrs: float = 0.0
    prop_cso: int = 0
    prop_hrs_to_overhaul: Optional[float] = None

    def evolve(self, **changes: Any) -> "UsageSnapshot":
        return replace(self, **changes)


class Baseline:
    """
    Counters as of a known epoch date, the fixed starting point of a replay.

    These numbers are per-aircraft configuration (read from the aircraft's
    data file). TSO/CSO stay pinned at these values during replay until an
    overhaul event resets them.
    """

    def __init__(
        self,
        epoch_date: str,
        aircraft_hrs: float,
        aircraft_cyc: int,
        cofa_hours: float = 0.0,
        hours_to_check: float = 0.0,
        engine_tsn_hrs: float = 0.0,
        engine_csn: int = 0,
        engine_tso_hrs: float = 0.0,
        engine_cso: int = 0,
        engine_hrs_to_overhaul: Optional[float] = None,
        prop_tsn_hrs: float = 0.0,
        prop_csn: int = 0,
        prop_tso_hrs: float = 0.0,
        prop_cso: int = 0,
        prop_hrs_to_overhaul: Optional[float] = None,
    ):
        self.epoch_date = epoch_date
        self.aircraft_hrs = aircraft_hrs
        self.aircraft_cyc = aircraft_cyc
        self.cofa_hours = cofa_hours or 0.0
        self.hours_to_check = hours_to_check or 0.0
        self.engine_tsn_hrs = engine_tsn_hrs or 0.0
        self.engine_csn = engine_csn or 0
        self.engine_tso_hrs = engine_tso_hrs or 0.0
        self.engine_cso = engine_cso or 0
        self.engine_hrs_to_overhaul = engine_hrs_to_overhaul
        self.prop_tsn_hrs = prop_tsn_hrs or 0.0
        self.prop_csn = prop_csn or 0
        self.prop_tso_hrs = prop_tso_hrs or 0.0
        self.prop_cso = prop_cso or 0
        self.prop_hrs_to_overhaul = prop_hrs_to_overhaul

    def snapshot(self) -> UsageSnapshot:
        """The baseline expressed as the snapshot every replay starts from."""
        return UsageSnapshot(
            as_of=self.epoch_date,
            aircraft_hrs=self.aircraft_hrs,
            aircraft_cyc=self.aircraft_cyc,
            cofa_hours=self.cofa_hours,
            hours_to_check=self.hours_to_check,
            engine_tsn_hrs=self.engine_tsn_hrs,
            engine_csn=self.engine_csn,
            engine_tso_hrs=self.engine_tso_hrs,
            engine_cso=self.engine_cso,
            engine_hrs_to_overhaul=self.engine_hrs_to_overhaul,
            prop_tsn_hrs=self.prop_tsn_hrs,
            prop_csn=self.prop_csn,
            prop_tso_hrs=self.prop_tso_hrs,
            prop_cso=self.prop_cso,
            prop_hrs_to_overhaul=self.prop_hrs_to_overhaul,
        )
