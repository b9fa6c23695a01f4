"""Plugin registry for providers and dumpers.

The registry is an explicit table built at startup and handed to whatever
needs to create plugins, instead of a process-wide service locator.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from geofallback.core.config import Settings
from geofallback.geocoding.dumpers import DUMPERS, dumper_factory
from geofallback.geocoding.exceptions import PluginNotFoundError
from geofallback.geocoding.providers import PROVIDERS, provider_factory

PROVIDER = "Provider"
DUMPER = "Dumper"
PLUGIN_KINDS: tuple[str, ...] = (PROVIDER, DUMPER)

PluginFactory = Callable[[Mapping[str, Any]], Any]


@dataclass(frozen=True)
class PluginDefinition:
    """A registered plugin."""

    kind: str
    id: str
    name: str
    factory: PluginFactory


def normalize_kind(kind: str) -> str:
    """Upper-case the first letter of a plugin kind ("provider" -> "Provider")."""
    return kind[:1].upper() + kind[1:]


class PluginRegistry:
    """Maps ``(kind, id)`` pairs to plugin factories."""

    def __init__(self) -> None:
        self._definitions: dict[str, dict[str, PluginDefinition]] = {
            kind: {} for kind in PLUGIN_KINDS
        }

    def _table(self, kind: str) -> dict[str, PluginDefinition]:
        try:
            return self._definitions[normalize_kind(kind)]
        except KeyError:
            raise PluginNotFoundError(kind) from None

    def register(
        self,
        kind: str,
        plugin_id: str,
        factory: PluginFactory,
        name: str | None = None,
    ) -> PluginDefinition:
        """Register a plugin factory.

        Args:
            kind: Plugin kind ("Provider" or "Dumper")
            plugin_id: Plugin id, stored lowercase
            factory: Callable receiving the plugin options
            name: Display name, defaults to the id

        Returns:
            The stored definition
        """
        table = self._table(kind)
        plugin_id = plugin_id.lower()
        definition = PluginDefinition(
            kind=normalize_kind(kind),
            id=plugin_id,
            name=name or plugin_id,
            factory=factory,
        )
        table[plugin_id] = definition
        return definition

    def get_definitions(self, kind: str) -> list[PluginDefinition]:
        return list(self._table(kind).values())

    def has_plugin(self, kind: str, plugin_id: str) -> bool:
        return plugin_id.lower() in self._table(kind)

    def create_instance(
        self,
        kind: str,
        plugin_id: str,
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Create a fresh plugin instance.

        Args:
            kind: Plugin kind
            plugin_id: Plugin id, case-insensitive
            options: Options handed to the plugin factory

        Returns:
            The new plugin instance

        Raises:
            PluginNotFoundError: If the kind or id is not registered
        """
        table = self._table(kind)
        definition = table.get(plugin_id.lower())
        if definition is None:
            raise PluginNotFoundError(normalize_kind(kind), plugin_id)
        return definition.factory(options or {})

    def get_plugins(self, kind: str) -> dict[str, str]:
        """List plugins of ``kind`` as ``{id: display name}`` sorted by name."""
        return dict(
            sorted(
                ((d.id, d.name) for d in self._table(kind).values()),
                key=lambda item: item[1],
            )
        )


def build_default_registry(settings: Settings) -> PluginRegistry:
    """Register every geopy provider and every dumper.

    Args:
        settings: Settings supplying provider defaults (timeout, user agent)

    Returns:
        A populated registry
    """
    registry = PluginRegistry()
    defaults = {
        "timeout": settings.GEOCODER_TIMEOUT,
        "user_agent": settings.GEOCODER_USER_AGENT,
    }
    for spec in PROVIDERS:
        registry.register(PROVIDER, spec.id, provider_factory(spec, defaults), spec.name)
    for dumper_id, (name, dumper_class) in DUMPERS.items():
        registry.register(DUMPER, dumper_id, dumper_factory(dumper_class), name)
    return registry
