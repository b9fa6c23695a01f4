"""Dumper plugins rendering an address in common geo formats."""

import json
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any
from xml.sax.saxutils import escape

from geofallback.geocoding.models import Address


def _cdata(text: str) -> str:
    return text.replace("]]>", "]]]]><![CDATA[>")


class Dumper(ABC):
    """Base class for dumper plugins."""

    def __init__(self, options: Mapping[str, Any] | None = None):
        self.options: dict[str, Any] = dict(options or {})

    @abstractmethod
    def dump(self, address: Address) -> str:
        """Render ``address`` as a string."""
        raise NotImplementedError


class GeoJsonDumper(Dumper):
    """Renders a GeoJSON Feature with a Point geometry."""

    def dump(self, address: Address) -> str:
        properties = {
            "formatted_address": address.formatted_address,
            "provider": address.provider,
        }
        if address.altitude is not None:
            properties["altitude"] = address.altitude
        feature = {
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": [address.longitude, address.latitude],
            },
            "properties": properties,
        }
        return json.dumps(feature, indent=self.options.get("indent"))


class WktDumper(Dumper):
    """Renders a WKT POINT, longitude first."""

    def dump(self, address: Address) -> str:
        return f"POINT({address.longitude} {address.latitude})"


class KmlDumper(Dumper):
    """Renders a KML document holding one Placemark."""

    TEMPLATE = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<kml xmlns="http://www.opengis.net/kml/2.2">\n'
        "    <Document>\n"
        "        <Placemark>\n"
        "            <name><![CDATA[{name}]]></name>\n"
        "            <description><![CDATA[{name}]]></description>\n"
        "            <Point>\n"
        "                <coordinates>{longitude},{latitude},0</coordinates>\n"
        "            </Point>\n"
        "        </Placemark>\n"
        "    </Document>\n"
        "</kml>"
    )

    def dump(self, address: Address) -> str:
        return self.TEMPLATE.format(
            name=_cdata(address.formatted_address),
            latitude=address.latitude,
            longitude=address.longitude,
        )


class GpxDumper(Dumper):
    """Renders a GPX 1.0 document with a single waypoint."""

    def dump(self, address: Address) -> str:
        creator = escape(str(self.options.get("creator", "geofallback")))
        lines = [
            '<?xml version="1.0" encoding="UTF-8" standalone="no" ?>',
            "<gpx",
            '    version="1.0"',
            f'    creator="{creator}"',
            '    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"',
            '    xmlns="http://www.topografix.com/GPX/1/0"',
            '    xsi:schemaLocation="http://www.topografix.com/GPX/1/0 '
            'http://www.topografix.com/GPX/1/0/gpx.xsd">',
            f'    <wpt lat="{address.latitude:.7f}" lon="{address.longitude:.7f}">',
            f"        <name><![CDATA[{_cdata(address.formatted_address)}]]></name>",
            "        <type><![CDATA[Address]]></type>",
            "    </wpt>",
            "</gpx>",
        ]
        return "\n".join(lines)


DUMPERS: dict[str, tuple[str, type[Dumper]]] = {
    "geojson": ("GeoJSON", GeoJsonDumper),
    "gpx": ("GPX", GpxDumper),
    "kml": ("KML", KmlDumper),
    "wkt": ("WKT", WktDumper),
}


def dumper_factory(dumper_class: type[Dumper]) -> Callable[[Mapping[str, Any]], Dumper]:
    def factory(options: Mapping[str, Any]) -> Dumper:
        return dumper_class(options)

    return factory
