"""Validation errors raised by the core before any computation."""


class AgendaError(Exception):
    """Base class for all agenda errors."""


class InvalidInterval(AgendaError, ValueError):
    """An event whose start is not strictly before its end."""


class InvalidCriteria(AgendaError, ValueError):
    """Scoring criteria with a negative weight."""


class InvalidDuration(AgendaError, ValueError):
    """A non-positive duration, step or horizon."""
