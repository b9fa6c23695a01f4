"""Geocoder service wiring settings, registry and resolver together.

This module provides the entry point most callers need:
- Forward and reverse geocoding with ordered provider fallback
- Provider and dumper lookup through the plugin registry
- Rendering results through dumper plugins
"""

from collections.abc import Iterable, Mapping
from typing import Any

from geofallback.core.config import Settings, settings as default_settings
from geofallback.core.logging import LogSink, StructlogSink, get_logger
from geofallback.geocoding.dumpers import Dumper
from geofallback.geocoding.models import Address, AddressCollection
from geofallback.geocoding.registry import (
    DUMPER,
    PluginRegistry,
    build_default_registry,
)
from geofallback.geocoding.resolver import FallbackResolver, Plugins, ProviderOptions

logger = get_logger()


class GeocoderService:
    """Geocoding facade configured from ``Settings``."""

    def __init__(
        self,
        settings: Settings | None = None,
        registry: PluginRegistry | None = None,
        sink: LogSink | None = None,
    ):
        """Initialize the service.

        Args:
            settings: Settings to use, defaults to the module-level settings
            registry: Plugin registry, defaults to every built-in plugin
            sink: Log sink for resolution diagnostics
        """
        self.settings = settings or default_settings
        self.registry = registry or build_default_registry(self.settings)
        self.sink = sink or StructlogSink(channel=self.settings.LOG_CHANNEL)
        self.resolver = FallbackResolver(
            self.registry,
            self.sink,
            geocode_plugins=self.settings.GEOCODER_PLUGINS,
            reverse_plugins=self.settings.GEOCODER_REVERSE_PLUGINS,
        )
        logger.debug(
            "Geocoder service initialized",
            geocode_plugins=self.resolver.geocode_plugins,
            reverse_plugins=self.resolver.reverse_plugins,
        )

    def geocode(
        self,
        data: str,
        plugins: Plugins | None = None,
        options: ProviderOptions | None = None,
    ) -> AddressCollection | None:
        """Geocode an address, falling back through ``plugins``.

        Args:
            data: The address to geocode
            plugins: Provider id or ids, defaults to ``GEOCODER_PLUGINS``
            options: Per-provider options, defaults to
                ``GEOCODER_PROVIDER_OPTIONS``

        Returns:
            Addresses from the first provider that answered, or None
        """
        return self.resolver.geocode(data, plugins, self._options(options))

    def reverse(
        self,
        latitude: float,
        longitude: float,
        plugins: Plugins | None = None,
        options: ProviderOptions | None = None,
    ) -> AddressCollection | None:
        """Reverse geocode coordinates, falling back through ``plugins``.

        Args:
            latitude: The latitude
            longitude: The longitude
            plugins: Provider id or ids, defaults to ``GEOCODER_REVERSE_PLUGINS``
            options: Per-provider options, defaults to
                ``GEOCODER_PROVIDER_OPTIONS``

        Returns:
            Addresses from the first provider that answered, or None
        """
        return self.resolver.reverse(
            latitude, longitude, plugins, self._options(options)
        )

    def get_plugin(
        self, kind: str, plugin_id: str, options: Mapping[str, Any] | None = None
    ) -> Any:
        """Return a new plugin instance of ``kind``."""
        return self.registry.create_instance(kind, plugin_id, options)

    def get_plugins(self, kind: str) -> dict[str, str]:
        """Return ``{id: display name}`` for ``kind``, sorted by name."""
        return self.registry.get_plugins(kind)

    def dump(
        self,
        addresses: Iterable[Address],
        dumper_id: str,
        options: Mapping[str, Any] | None = None,
    ) -> list[str]:
        """Render each address with the ``dumper_id`` dumper.

        Args:
            addresses: Addresses to render, usually a geocoding result
            dumper_id: Dumper plugin id (geojson, gpx, kml, wkt)
            options: Options for the dumper

        Returns:
            One rendered string per address
        """
        dumper: Dumper = self.registry.create_instance(DUMPER, dumper_id, options)
        return [dumper.dump(address) for address in addresses]

    def _options(self, options: ProviderOptions | None) -> ProviderOptions:
        if options is None:
            return self.settings.GEOCODER_PROVIDER_OPTIONS
        return options


# Shared instance
_geocoder_service: GeocoderService | None = None


def get_geocoder_service() -> GeocoderService:
    """Get or create the shared geocoder service instance.

    Returns:
        GeocoderService instance
    """
    global _geocoder_service
    if _geocoder_service is None:
        _geocoder_service = GeocoderService()
    return _geocoder_service
