"""Geocoding provider plugins backed by geopy.

Every provider exposes ``geocode`` and ``reverse`` and answers with a
``ProviderResult`` instead of raising, so callers can branch on ``Ok``/``Err``.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from geopy.exc import (
    ConfigurationError,
    GeocoderAuthenticationFailure,
    GeocoderInsufficientPrivileges,
    GeopyError,
)
from geopy.geocoders import (
    ArcGIS,
    Bing,
    GeoNames,
    GoogleV3,
    HereV7,
    MapBox,
    MapQuest,
    Nominatim,
    OpenCage,
    Photon,
    TomTom,
    Yandex,
)
from geopy.geocoders.base import Geocoder

from geofallback.core.logging import get_logger
from geofallback.geocoding.models import Address, AddressCollection
from geofallback.geocoding.results import Err, FailureKind, Ok, ProviderResult

logger = get_logger()


class GeocoderProvider(ABC):
    """Base class for provider plugins."""

    def __init__(self, plugin_id: str, options: Mapping[str, Any] | None = None):
        self.plugin_id = plugin_id
        self.options: dict[str, Any] = dict(options or {})

    @abstractmethod
    def geocode(self, query: str) -> ProviderResult:
        """Resolve a free-text address.

        Args:
            query: Address string to geocode

        Returns:
            ``Ok`` with the matching addresses, or ``Err`` describing the failure
        """
        raise NotImplementedError

    @abstractmethod
    def reverse(self, latitude: float, longitude: float) -> ProviderResult:
        """Resolve a coordinate pair into addresses.

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate

        Returns:
            ``Ok`` with the matching addresses, or ``Err`` describing the failure
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(plugin_id='{self.plugin_id}')"


class GeopyProvider(GeocoderProvider):
    """Provider delegating to a single geopy geocoder class."""

    def __init__(
        self,
        plugin_id: str,
        handler: type[Geocoder],
        options: Mapping[str, Any] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ):
        super().__init__(plugin_id, options)
        self.handler = handler
        self.defaults: dict[str, Any] = dict(defaults or {})
        self._geocoder: Geocoder | None = None

    @property
    def geocoder(self) -> Geocoder:
        """The geopy geocoder, built on first use.

        Raises:
            ConfigurationError: If geopy rejects the options
            TypeError: If a required option such as ``api_key`` is missing
        """
        if self._geocoder is None:
            self._geocoder = self.handler(**{**self.defaults, **self.options})
        return self._geocoder

    def geocode(self, query: str) -> ProviderResult:
        return self._run(
            "geocode",
            query,
            description=f'"{query}"',
        )

    def reverse(self, latitude: float, longitude: float) -> ProviderResult:
        return self._run(
            "reverse",
            (latitude, longitude),
            description=f'"{latitude} {longitude}"',
        )

    def _run(self, operation: str, query: Any, description: str) -> ProviderResult:
        # Missing credentials surface here, as a failed call, not at lookup.
        try:
            geocoder = self.geocoder
        except (ConfigurationError, TypeError) as e:
            return Err(FailureKind.INVALID_CREDENTIALS, f"{self.plugin_id}: {e}")

        try:
            locations = getattr(geocoder, operation)(query, exactly_one=False)
        except (GeocoderAuthenticationFailure, GeocoderInsufficientPrivileges) as e:
            return Err(FailureKind.INVALID_CREDENTIALS, f"{self.plugin_id}: {e}")
        except GeopyError as e:
            return Err(FailureKind.RUNTIME, f"{self.plugin_id}: {e}")

        if not locations:
            return Err(
                FailureKind.NO_RESULT,
                f"{self.plugin_id}: No results found for {description}.",
            )

        logger.debug(
            "Provider answered", plugin=self.plugin_id, results=len(locations)
        )
        return Ok(
            AddressCollection(
                Address.from_location(location, self.plugin_id)
                for location in locations
            )
        )


@dataclass(frozen=True)
class ProviderSpec:
    """Declares a geopy-backed provider plugin."""

    id: str
    name: str
    handler: type[Geocoder]


PROVIDERS: tuple[ProviderSpec, ...] = (
    ProviderSpec("arcgisonline", "ArcGISOnline", ArcGIS),
    ProviderSpec("bingmaps", "BingMaps", Bing),
    ProviderSpec("geonames", "GeoNames", GeoNames),
    ProviderSpec("googlemaps", "GoogleMaps", GoogleV3),
    ProviderSpec("here", "Here", HereV7),
    ProviderSpec("mapbox", "Mapbox", MapBox),
    ProviderSpec("mapquest", "MapQuest", MapQuest),
    ProviderSpec("opencage", "OpenCage", OpenCage),
    ProviderSpec("openstreetmap", "OpenStreetMap", Nominatim),
    ProviderSpec("photon", "Photon", Photon),
    ProviderSpec("tomtom", "TomTom", TomTom),
    ProviderSpec("yandex", "Yandex", Yandex),
)


def provider_factory(
    spec: ProviderSpec, defaults: Mapping[str, Any] | None = None
) -> Callable[[Mapping[str, Any]], GeopyProvider]:
    """Return a registry factory creating a fresh provider for ``spec``.

    Args:
        spec: Provider declaration
        defaults: Options applied underneath the caller's options

    Returns:
        Callable taking the per-call options
    """

    def factory(options: Mapping[str, Any]) -> GeopyProvider:
        return GeopyProvider(spec.id, spec.handler, options, defaults)

    return factory
