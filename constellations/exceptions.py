"""Exceptions raised by constellation generation."""


class ConfigurationError(ValueError):
    """Invalid generation parameters, rejected before any sampling."""


class InvariantViolation(RuntimeError):
    """A generated structure broke one of its invariants.

    This is a logic defect, never an input problem. Generation is aborted
    instead of returning an inconsistent graph.
    """
