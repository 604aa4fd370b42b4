"""
Exceptions raised by the claims analytics engine.

Every error is local to the call that raised it: the engine holds no state,
so retrying with the same input reproduces the same outcome.
"""


class ClaimsAnalyticsError(Exception):
    """Base class for all analytics errors."""


class NoDataError(ClaimsAnalyticsError):
    """An aggregate was requested over an empty group."""


class InsufficientGroupsError(ClaimsAnalyticsError):
    """Percentile-based detection needs more distinct groups than were given."""

    def __init__(self, n_groups: int, required: int):
        self.n_groups = n_groups
        self.required = required
        super().__init__(
            f"percentile detection needs at least {required} groups, got {n_groups}"
        )


class InvalidFieldError(ClaimsAnalyticsError, ValueError):
    """Unknown or non-numeric field, grouping key or option value."""


class MissingColumnsError(InvalidFieldError):
    """Input frame lacks columns an operation depends on."""

    def __init__(self, missing):
        self.missing = sorted(missing)
        super().__init__(f"missing required columns: {', '.join(self.missing)}")


class DataQualityError(ClaimsAnalyticsError):
    """Loaded data violates a table invariant (duplicate keys, negative losses)."""
