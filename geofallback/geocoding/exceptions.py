"""Exceptions raised by the geocoding package."""


class GeocoderError(Exception):
    """Base class for geocoding errors."""


class PluginNotFoundError(GeocoderError, KeyError):
    """Raised when a plugin kind or id is not registered.

    This signals misconfiguration and is never recovered by the resolver.
    """

    def __init__(self, kind: str, plugin_id: str | None = None) -> None:
        self.kind = kind
        self.plugin_id = plugin_id
        if plugin_id is None:
            message = f'Unknown plugin type "{kind}".'
        else:
            message = f'The "{plugin_id}" plugin of type "{kind}" does not exist.'
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise quote the message
        return str(self.args[0])


class ProviderError(GeocoderError):
    """A provider failed to answer a query."""


class InvalidCredentialsError(ProviderError):
    """A provider rejected the configured credentials."""
