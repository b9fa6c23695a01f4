"""Tests for the geocoder service facade."""

import json
from unittest.mock import MagicMock, patch

import pytest
from geopy.exc import GeocoderUnavailable
from geopy.geocoders import Nominatim
from geopy.location import Location

from geofallback.core.config import Settings
from geofallback.core.logging import StructlogSink
from geofallback.geocoding import GeocoderService, get_geocoder_service
from geofallback.geocoding.exceptions import PluginNotFoundError
from geofallback.geocoding.registry import DUMPER, PROVIDER
from tests.fixtures.geocoding import err, ok


@pytest.fixture
def service_settings() -> Settings:
    return Settings(
        GEOCODER_PLUGINS=["a", "b"],
        GEOCODER_REVERSE_PLUGINS=["b"],
        GEOCODER_PROVIDER_OPTIONS={"A": {"api_key": "from-settings"}},
    )


@pytest.fixture
def service(service_settings, registry, sink) -> GeocoderService:
    return GeocoderService(service_settings, registry=registry, sink=sink)


class TestGeocoderService:
    """GeocoderService wires settings into the resolver."""

    def test_geocode_uses_configured_plugins_and_options(
        self, service, fake_providers, sink, baker_street
    ):
        fake_providers.add("a", err("a is down"))
        fake_providers.add("b", ok(baker_street))

        assert service.geocode("221B Baker Street") == baker_street
        assert fake_providers.options["a"] == [{"api_key": "from-settings"}]
        assert fake_providers.options["b"] == [{}]
        assert sink.messages == ["a is down"]

    def test_explicit_options_replace_settings(
        self, service, fake_providers, baker_street
    ):
        fake_providers.add("a", ok(baker_street))

        service.geocode("221B Baker Street", options={"a": {"api_key": "explicit"}})

        assert fake_providers.options["a"] == [{"api_key": "explicit"}]

    def test_reverse_uses_reverse_plugins(self, service, fake_providers, sink):
        fake_providers.add("a", ok(None))
        fake_providers.add("b", err("b is down"))

        assert service.reverse(51.5, -0.15) is None
        assert fake_providers.calls("a") == 0
        assert sink.messages[-1] == 'No plugin could reverse geocode: "51.5 -0.15".'

    def test_get_plugin_and_listing(self, service, fake_providers):
        fake_providers.add("a", err(), name="Provider A")

        assert service.get_plugin(PROVIDER, "a").plugin_id == "a"
        assert service.get_plugins(PROVIDER) == {"a": "Provider A"}
        with pytest.raises(PluginNotFoundError):
            service.get_plugin(PROVIDER, "zzz")

    def test_default_wiring(self):
        service = GeocoderService(Settings())

        assert isinstance(service.sink, StructlogSink)
        assert service.resolver.geocode_plugins == ("googlemaps",)
        assert service.resolver.reverse_plugins == ("googlemaps",)
        assert "openstreetmap" in service.get_plugins(PROVIDER)
        assert "wkt" in service.get_plugins(DUMPER)

    def test_dump(self, make_address):
        service = GeocoderService(Settings())
        addresses = [make_address("A", 1.0, 2.0), make_address("B", 3.0, 4.0)]

        assert service.dump(addresses, "wkt") == ["POINT(2.0 1.0)", "POINT(4.0 3.0)"]
        features = [json.loads(f) for f in service.dump(addresses, "geojson")]
        assert [f["properties"]["formatted_address"] for f in features] == ["A", "B"]

    def test_geocode_end_to_end_with_mocked_geopy(self):
        """The default registry's providers delegate to geopy."""
        service = GeocoderService(Settings())
        sink = MagicMock()
        service.resolver.sink = sink

        with patch.object(
            Nominatim,
            "geocode",
            side_effect=GeocoderUnavailable("Service not available"),
        ) as geocode:
            result = service.geocode("221B Baker Street", ["openstreetmap"])

        assert result is None
        geocode.assert_called_once_with("221B Baker Street", exactly_one=False)
        messages = [call.args[0] for call in sink.log.call_args_list]
        assert messages == [
            "openstreetmap: Service not available",
            'No plugin could geocode: "221B Baker Street".',
        ]
        assert sink.log.call_args_list[0].kwargs == {
            "plugin": "openstreetmap",
            "failure_kind": "runtime",
        }


    def test_googlemaps_without_key_falls_through_to_openstreetmap(self):
        """A provider that cannot be built is skipped like any other failure."""
        sink = MagicMock()
        service = GeocoderService(Settings(), sink=sink)
        location = Location(
            "221B Baker Street, London", (51.5237, -0.1585, 0.0), {"place_id": 1}
        )

        with patch.object(Nominatim, "geocode", return_value=[location]):
            result = service.geocode(
                "221B Baker Street", ["googlemaps", "openstreetmap"]
            )

        assert result.first().provider == "openstreetmap"
        assert result.first().coordinates == (51.5237, -0.1585)
        sink.log.assert_called_once()
        message = sink.log.call_args.args[0]
        assert message.startswith("googlemaps: ")
        assert sink.log.call_args.kwargs == {
            "plugin": "googlemaps",
            "failure_kind": "invalid_credentials",
        }

    def test_default_plugins_without_key_return_none(self):
        sink = MagicMock()
        service = GeocoderService(Settings(), sink=sink)

        assert service.geocode("221B Baker Street") is None
        messages = [call.args[0] for call in sink.log.call_args_list]
        assert len(messages) == 2
        assert messages[0].startswith("googlemaps: ")
        assert messages[1] == 'No plugin could geocode: "221B Baker Street".'

def test_get_geocoder_service_is_shared():
    with patch("geofallback.geocoding.service._geocoder_service", None):
        first = get_geocoder_service()
        second = get_geocoder_service()

    assert first is second
