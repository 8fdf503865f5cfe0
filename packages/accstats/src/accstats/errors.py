"""Exceptions raised by the feature pipeline."""


class DomainError(ValueError):
    """Inputs violate a statistic's preconditions (length mismatch, lag too large)."""


class EpochTooShortError(ValueError):
    """Epoch has too few samples for a windowed computation."""
