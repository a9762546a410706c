"""Exceptions raised for bad ledger and maintenance input."""


class FleetError(Exception):
    """Base class for errors surfaced to the caller."""


class ValidationError(FleetError, ValueError):
    """Malformed or incomplete flight log entry or maintenance item."""


class MissingReferenceError(FleetError, LookupError):
    """An entry refers to an aircraft or maintenance item that does not exist."""
