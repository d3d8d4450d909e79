"""Error taxonomy for the AgeBond server.

Calculation errors never leave a solver: they are converted to a failed
CalculationResult so callers can render the message directly. Store, main
person and query errors propagate to the MCP tool layer.
"""


class AgebondError(Exception):
    """Base class for all AgeBond errors."""


class CalculationError(AgebondError):
    """Base class for recoverable failures of a single calculation."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class MissingParameter(CalculationError):
    """A required person, event or value was not supplied."""


class InvalidParameter(MissingParameter):
    """A value was supplied but cannot be used (e.g. a negative age)."""


class RecordNotFound(CalculationError):
    """A supplied id does not resolve to a person, event or template."""


class MissingDateField(CalculationError):
    """A resolved person or event has no date."""


class InvalidDateFormat(CalculationError):
    """A date string is not a valid YYYY-MM-DD calendar date."""


class InfeasibleResult(CalculationError):
    """The solve produced a date that violates a domain constraint."""


class FamilyStoreError(AgebondError):
    """A family store update was rejected."""


class MainPersonError(AgebondError):
    """The family does not have exactly one person tagged 'self'."""


class QueryError(AgebondError):
    """A natural-language question could not be resolved."""
