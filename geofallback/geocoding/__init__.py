"""Geocoding with ordered provider fallback.

This package provides:
- A fallback resolver trying providers in priority order
- geopy-backed provider plugins and geo-format dumper plugins
- An explicit plugin registry
- A settings-driven service facade
"""

from geofallback.geocoding.exceptions import (
    GeocoderError,
    InvalidCredentialsError,
    PluginNotFoundError,
    ProviderError,
)
from geofallback.geocoding.models import Address, AddressCollection
from geofallback.geocoding.registry import (
    DUMPER,
    PROVIDER,
    PluginRegistry,
    build_default_registry,
)
from geofallback.geocoding.resolver import FallbackResolver
from geofallback.geocoding.results import Err, FailureKind, Ok
from geofallback.geocoding.service import GeocoderService, get_geocoder_service

__all__ = [
    "Address",
    "AddressCollection",
    "DUMPER",
    "Err",
    "FailureKind",
    "FallbackResolver",
    "GeocoderError",
    "GeocoderService",
    "InvalidCredentialsError",
    "Ok",
    "PROVIDER",
    "PluginNotFoundError",
    "PluginRegistry",
    "ProviderError",
    "build_default_registry",
    "get_geocoder_service",
]
