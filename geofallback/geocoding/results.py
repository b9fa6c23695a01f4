"""Result types returned by provider calls."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from geofallback.geocoding.models import AddressCollection


class FailureKind(str, Enum):
    """Why a provider could not answer a query."""

    INVALID_CREDENTIALS = "invalid_credentials"
    NO_RESULT = "no_result"
    RUNTIME = "runtime"


@dataclass(frozen=True)
class Ok:
    """A provider answered with at least one address."""

    addresses: AddressCollection


@dataclass(frozen=True)
class Err:
    """A provider failed; ``message`` is what gets logged."""

    kind: FailureKind
    message: str


ProviderResult = Union[Ok, Err]
