"""Address models returned by providers."""

from collections.abc import Iterable, Iterator, Sequence
from typing import Any, overload

from geopy.location import Location
from pydantic import BaseModel, ConfigDict, Field


class Address(BaseModel):
    """A single resolved address."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    altitude: float | None = None
    formatted_address: str = ""
    provider: str | None = Field(
        default=None, description="Id of the provider plugin that produced it"
    )
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_location(cls, location: Location, provider: str | None = None) -> "Address":
        """Build an address from a geopy ``Location``.

        Args:
            location: Location returned by a geopy geocoder
            provider: Id of the provider plugin that returned it

        Returns:
            Address carrying the location's coordinates and raw payload
        """
        raw = location.raw if isinstance(location.raw, dict) else {}
        return cls(
            latitude=location.latitude,
            longitude=location.longitude,
            altitude=location.altitude or None,
            formatted_address=location.address or "",
            provider=provider,
            raw=raw,
        )

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class AddressCollection(Sequence[Address]):
    """Ordered, immutable collection of addresses from one provider call."""

    def __init__(self, addresses: Iterable[Address] = ()) -> None:
        self._addresses: tuple[Address, ...] = tuple(addresses)

    @overload
    def __getitem__(self, index: int) -> Address: ...

    @overload
    def __getitem__(self, index: slice) -> "AddressCollection": ...

    def __getitem__(self, index: int | slice) -> "Address | AddressCollection":
        if isinstance(index, slice):
            return AddressCollection(self._addresses[index])
        return self._addresses[index]

    def __len__(self) -> int:
        return len(self._addresses)

    def __iter__(self) -> Iterator[Address]:
        return iter(self._addresses)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AddressCollection):
            return NotImplemented
        return self._addresses == other._addresses

    def __repr__(self) -> str:
        return f"AddressCollection({list(self._addresses)!r})"

    def first(self) -> Address | None:
        """Return the best match, or None for an empty collection."""
        return self._addresses[0] if self._addresses else None
