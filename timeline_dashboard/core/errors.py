"""Exceptions raised by timeline_dashboard."""


class TimelineError(Exception):
    """Base class for timeline errors."""


class TimelineLoadError(TimelineError):
    """The item list could not be retrieved from its source."""
