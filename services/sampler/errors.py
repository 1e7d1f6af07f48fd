"""Exceptions for spot sampling."""


class CheckUnavailableError(Exception):
    """Raised when a land check could not be performed (timeout, outage, bad payload).

    This is different from a negative check result, where the service answered
    and the area looked unsuitable.
    """
