"""Geocoding test fixtures."""

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from geofallback.geocoding.models import Address, AddressCollection
from geofallback.geocoding.providers import GeocoderProvider
from geofallback.geocoding.registry import PROVIDER, PluginRegistry
from geofallback.geocoding.results import Err, FailureKind, Ok, ProviderResult


class RecordingSink:
    """Log sink keeping every call for assertions."""

    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []

    def log(self, message: str, severity: Any, **context: Any) -> None:
        level = str(getattr(severity, "value", severity))
        self.records.append({"message": message, "severity": level, **context})

    @property
    def messages(self) -> list[str]:
        return [record["message"] for record in self.records]


class FakeProvider(GeocoderProvider):
    """Provider answering from a canned behaviour.

    ``behaviour`` is a ``ProviderResult`` to return or an exception to raise.
    """

    def __init__(self, plugin_id: str, behaviour: Any, options: Mapping[str, Any]):
        super().__init__(plugin_id, options)
        self.behaviour = behaviour
        self.geocode_calls: list[str] = []
        self.reverse_calls: list[tuple[float, float]] = []

    def _answer(self) -> ProviderResult:
        if isinstance(self.behaviour, BaseException):
            raise self.behaviour
        return self.behaviour

    def geocode(self, query: str) -> ProviderResult:
        self.geocode_calls.append(query)
        return self._answer()

    def reverse(self, latitude: float, longitude: float) -> ProviderResult:
        self.reverse_calls.append((latitude, longitude))
        return self._answer()


class FakeProviderSet:
    """Registers fake providers and remembers every instance and option set."""

    def __init__(self, registry: PluginRegistry) -> None:
        self.registry = registry
        self.instances: dict[str, list[FakeProvider]] = {}
        self.options: dict[str, list[dict[str, Any]]] = {}

    def add(self, plugin_id: str, behaviour: Any, name: str | None = None) -> None:
        def factory(options: Mapping[str, Any]) -> FakeProvider:
            self.options.setdefault(plugin_id, []).append(dict(options))
            provider = FakeProvider(plugin_id, behaviour, options)
            self.instances.setdefault(plugin_id, []).append(provider)
            return provider

        self.registry.register(PROVIDER, plugin_id, factory, name)

    def calls(self, plugin_id: str) -> int:
        return sum(
            len(p.geocode_calls) + len(p.reverse_calls)
            for p in self.instances.get(plugin_id, [])
        )


@pytest.fixture
def sink() -> RecordingSink:
    """Recording log sink."""
    return RecordingSink()


@pytest.fixture
def registry() -> PluginRegistry:
    """Empty plugin registry."""
    return PluginRegistry()


@pytest.fixture
def fake_providers(registry: PluginRegistry) -> FakeProviderSet:
    """Helper registering fake providers on ``registry``."""
    return FakeProviderSet(registry)


@pytest.fixture
def make_address() -> Callable[..., Address]:
    """Factory for addresses."""

    def _make(
        formatted_address: str = "221B Baker Street, London",
        latitude: float = 51.5237,
        longitude: float = -0.1585,
        provider: str | None = "openstreetmap",
    ) -> Address:
        return Address(
            latitude=latitude,
            longitude=longitude,
            formatted_address=formatted_address,
            provider=provider,
        )

    return _make


@pytest.fixture
def baker_street(make_address: Callable[..., Address]) -> AddressCollection:
    """Collection holding a single Baker Street address."""
    return AddressCollection([make_address()])


def ok(addresses: AddressCollection) -> Ok:
    return Ok(addresses)


def err(
    message: str = "Service unavailable", kind: FailureKind = FailureKind.RUNTIME
) -> Err:
    return Err(kind, message)
