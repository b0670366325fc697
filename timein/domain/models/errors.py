"""Domain error types raised by the lookup flows.

The cache never raises these; it degrades to a miss instead.
"""


class TimeinError(Exception):
    """Base error for all lookup failures shown to the user."""


class MissingArgumentError(TimeinError):
    """Raised when the required city or timezone argument is empty."""


class InvalidTimezoneError(TimeinError):
    """Raised when a name is not a loadable IANA timezone."""


class InvalidLocationError(TimeinError):
    """Raised when coordinates are out of range or the name is empty."""


class GeocodingError(TimeinError):
    """Raised when a place name cannot be turned into coordinates."""


class TimezoneResolutionError(TimeinError):
    """Raised when coordinates cannot be mapped to a timezone."""


class PreseedError(TimeinError):
    """Raised when the capitals source for pre-seeding cannot be read."""
