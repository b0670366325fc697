"""Interface for coordinate -> timezone resolution."""

import abc

from timein.domain.models.common import TimezoneName


class TimezoneFinder(abc.ABC):
    """Abstract Base Class for timezone resolvers."""

    @abc.abstractmethod
    def timezone_at(self, longitude: float, latitude: float) -> TimezoneName:
        """Returns the IANA timezone containing the given point.

        Raises:
            TimezoneResolutionError: If no timezone covers the point.
        """
        pass
