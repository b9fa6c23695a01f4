"""Ordered provider fallback for forward and reverse geocoding."""

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

from geofallback.core.logging import LogSink, Severity
from geofallback.geocoding.exceptions import InvalidCredentialsError
from geofallback.geocoding.models import AddressCollection
from geofallback.geocoding.providers import GeocoderProvider
from geofallback.geocoding.registry import PROVIDER, PluginRegistry
from geofallback.geocoding.results import Err, FailureKind, Ok, ProviderResult

DEFAULT_GEOCODE_PLUGINS: tuple[str, ...] = ("googlemaps",)
DEFAULT_REVERSE_PLUGINS: tuple[str, ...] = ("googlemaps",)

Plugins = str | Sequence[str]
ProviderOptions = Mapping[str, Mapping[str, Any]]


class FallbackResolver:
    """Tries providers in order until one answers.

    Providers are created one at a time from the registry, so a provider after
    the first successful one is never instantiated. Every provider failure is
    logged and skipped; a ``PluginNotFoundError`` from the registry is not
    caught. When no provider answers, a final diagnostic is logged and
    ``None`` is returned.
    """

    def __init__(
        self,
        registry: PluginRegistry,
        sink: LogSink,
        geocode_plugins: Sequence[str] = DEFAULT_GEOCODE_PLUGINS,
        reverse_plugins: Sequence[str] = DEFAULT_REVERSE_PLUGINS,
    ) -> None:
        self.registry = registry
        self.sink = sink
        self.geocode_plugins = tuple(geocode_plugins)
        self.reverse_plugins = tuple(reverse_plugins)

    def geocode(
        self,
        data: str,
        plugins: Plugins | None = None,
        options: ProviderOptions | None = None,
    ) -> AddressCollection | None:
        """Geocode a free-text address.

        Args:
            data: The address to geocode
            plugins: Provider id or ids in priority order, defaults to
                ``geocode_plugins``
            options: Per-provider options keyed by provider id

        Returns:
            Addresses from the first provider that answered, or None
        """
        for plugin_id, provider in self._providers(
            plugins, self.geocode_plugins, options
        ):
            result = self._attempt(provider.geocode, data)
            if isinstance(result, Ok):
                return result.addresses
            self._log_failure(plugin_id, result)

        self.sink.log(f'No plugin could geocode: "{data}".', Severity.ERROR)
        return None

    def reverse(
        self,
        latitude: float,
        longitude: float,
        plugins: Plugins | None = None,
        options: ProviderOptions | None = None,
    ) -> AddressCollection | None:
        """Reverse geocode a coordinate pair.

        Args:
            latitude: The latitude
            longitude: The longitude
            plugins: Provider id or ids in priority order, defaults to
                ``reverse_plugins``
            options: Per-provider options keyed by provider id

        Returns:
            Addresses from the first provider that answered, or None
        """
        for plugin_id, provider in self._providers(
            plugins, self.reverse_plugins, options
        ):
            result = self._attempt(provider.reverse, latitude, longitude)
            if isinstance(result, Ok):
                return result.addresses
            self._log_failure(plugin_id, result)

        self.sink.log(
            f'No plugin could reverse geocode: "{latitude} {longitude}".',
            Severity.ERROR,
        )
        return None

    def _providers(
        self,
        plugins: Plugins | None,
        defaults: Sequence[str],
        options: ProviderOptions | None,
    ) -> Iterator[tuple[str, GeocoderProvider]]:
        if plugins is None:
            plugins = defaults
        elif isinstance(plugins, str):
            plugins = [plugins]
        scoped = {key.lower(): value for key, value in (options or {}).items()}

        for plugin_id in plugins:
            plugin_options = scoped.get(plugin_id.lower())
            provider = self.registry.create_instance(
                PROVIDER, plugin_id, dict(plugin_options or {})
            )
            yield plugin_id, provider

    @staticmethod
    def _attempt(call: Callable[..., ProviderResult], *args: Any) -> ProviderResult:
        # Providers should answer with Err, but third-party ones may raise.
        try:
            return call(*args)
        except InvalidCredentialsError as e:
            return Err(FailureKind.INVALID_CREDENTIALS, str(e))
        except Exception as e:
            return Err(FailureKind.RUNTIME, str(e))

    def _log_failure(self, plugin_id: str, result: Err) -> None:
        self.sink.log(
            result.message,
            Severity.ERROR,
            plugin=plugin_id,
            failure_kind=result.kind.value,
        )
