"""Telegraf client: write metric points to a Telegraf socket listener.

Usage::

    from telegraf_client import Client, point

    with Client("tcp://localhost:8094") as client:
        client.write(point("cpu", ("usage", 20.5), tags={"host": "a"}))
"""

from .address import Address, parse_address
from .client import Client
from .exceptions import (
    ConnectionFailed,
    DeliveryError,
    EncodingError,
    InvalidAddress,
    TelegrafError,
)
from .point import Metric, Point, point, point_from_dataclass
from .protocol import encode_point, format_field_value, to_field_value, to_line
from .transport import (
    TcpTransport,
    Transport,
    UdpTransport,
    UnixgramTransport,
    UnixTransport,
    create_transport,
)

__version__ = "0.1.0"
