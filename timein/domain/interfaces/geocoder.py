"""Interface for geocoding services (place name -> coordinates)."""

import abc

from timein.domain.models.geo import Location


class Geocoder(abc.ABC):
    """Abstract Base Class for geocoders."""

    @abc.abstractmethod
    async def geocode(self, query: str) -> Location:
        """Resolves a free-text place name to a Location.

        Args:
            query: City or landmark name.

        Returns:
            The best matching Location.

        Raises:
            GeocodingError: If the lookup fails or returns no result.
        """
        pass
