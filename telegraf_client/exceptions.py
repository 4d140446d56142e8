"""Exceptions raised by telegraf_client.

Everything derives from TelegrafError, so callers can catch the base class.
"""


class TelegrafError(Exception):
    """Base exception for all telegraf_client errors."""


class InvalidAddress(TelegrafError, ValueError):
    """Unrecognized scheme or malformed connection address."""


class ConnectionFailed(TelegrafError, ConnectionError):
    """The socket could not be opened or reopened."""


class EncodingError(TelegrafError, ValueError):
    """A point cannot be rendered as line protocol.

    Nothing has been sent and the connection is unaffected.
    """


class DeliveryError(TelegrafError, ConnectionError):
    """A point was encoded but could not be delivered to the agent."""


__all__ = [
    "ConnectionFailed",
    "DeliveryError",
    "EncodingError",
    "InvalidAddress",
    "TelegrafError",
]
