"""Exceptions raised by the partida lookup pipeline.

A missing partida is not an error: the resolver reports it as a value.
Everything here is a genuine failure that the HTTP layer maps to a 500.
"""


class PartidaError(Exception):
    """Base class for all lookup failures."""


class SessionStartFailure(PartidaError):
    """The headless browser could not be launched."""


class FetchError(PartidaError):
    """A single page fetch against the cadastral service failed.

    Attributes:
        url: The URL being fetched
        kind: Short discriminator so callers can branch without parsing messages
    """

    kind = "fetch"

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class NavigationTimeout(FetchError):
    kind = "timeout"

    def __init__(self, url: str):
        super().__init__(url, f"Navigation to {url} timed out")


class NavigationError(FetchError):
    kind = "navigation"

    def __init__(self, url: str, reason: str):
        super().__init__(url, f"Navigation to {url} failed: {reason}")
        self.reason = reason


class MalformedResponse(FetchError):
    """The rendered body was not valid JSON."""

    kind = "malformed"

    def __init__(self, url: str, snippet: str):
        super().__init__(url, f"Invalid JSON response from {url}")
        self.snippet = snippet


class MailDeliveryFailure(PartidaError):
    def __init__(self, recipient: str, reason: str):
        super().__init__(f"Could not deliver email to {recipient}: {reason}")
        self.recipient = recipient
        self.reason = reason
