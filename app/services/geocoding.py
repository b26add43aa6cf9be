"""Address geocoding against a Nominatim-compatible search API."""

import httpx

from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from app.models.types import UNKNOWN_LOCATION, Coordinates
from app.schemas.property import AddressCreate

logger = get_logger(__name__)


class Geocoder:
    """Resolves postal addresses to coordinates."""

    def __init__(
        self,
        url: str,
        user_agent: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.client = client if client is not None else httpx.Client(timeout=timeout)
        self.client.headers["User-Agent"] = user_agent

    def geocode(self, address: AddressCreate) -> Coordinates:
        """
        Look up the coordinates of an address.

        An address the service cannot place resolves to UNKNOWN_LOCATION (0, 0)
        rather than failing.

        Raises:
            ExternalServiceError: If the service cannot be reached or returns an error

        """
        params = {
            "street": address.address,
            "city": address.city,
            "country": address.country,
            "postalcode": address.postal_code,
            "format": "json",
            "limit": "1",
        }
        try:
            response = self.client.get(self.url, params=params)
            response.raise_for_status()
            results = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Geocoding request failed: %s", exc)
            raise ExternalServiceError("Geocoding service unavailable") from exc

        first = results[0] if isinstance(results, list) and results else {}
        try:
            return Coordinates(float(first["lon"]), float(first["lat"]))
        except (KeyError, TypeError, ValueError):
            logger.warning(
                "No coordinates for %s, %s; storing unknown location",
                address.address,
                address.city,
            )
            return UNKNOWN_LOCATION

    def close(self) -> None:
        self.client.close()
