"""Client writing points to a Telegraf socket listener."""

import logging
from typing import Optional, Union

from .address import Address
from .exceptions import InvalidAddress
from .point import Metric, Point
from .protocol import encode_point
from .transport import Transport, create_transport
from .utils import parse_config

logger = logging.getLogger("telegraf_client.client")

DEFAULT_SECTION = "telegraf"


class Client:
    def __init__(
        self, address: Union[Address, str], timeout: Optional[float] = None
    ) -> None:
        """Client that encodes points and writes them to a Telegraf socket listener.

        The connection is opened right away. Points are written synchronously
        and in the order write is called; a client must not be shared between
        threads without external locking.

        Example:
            >>> with Client("tcp://localhost:8094") as client:
            ...     client.write(point("cpu", ("usage", 20.5), tags={"host": "a"}))

        Args:
            address: Connection string <scheme>://<address> with scheme tcp, udp,
                unix or unixgram, or a parsed Address.
            timeout: Optional socket timeout in seconds.

        Attributes:
            transport: The transport owned by this client.

        Raises:
            InvalidAddress: If the address is malformed or the scheme unknown.
            ConnectionFailed: If the connection cannot be opened.
        """
        self.transport: Transport = create_transport(address, timeout=timeout)
        logger.info(f"Connected to {self.transport.address}.")

    @classmethod
    def from_config(cls, config_file: str, section: str = DEFAULT_SECTION) -> "Client":
        """Create a client from a section of an INI file.

        The section needs an ``address`` key and may have a ``timeout`` key.

        Args:
            config_file: Path to the configuration file.
            section: Name of the section.

        Raises:
            FileNotFoundError: If the file does not exist.
            KeyError: If the section does not exist.
            InvalidAddress: If the section has no address.
            ValueError: If the timeout is not a number.
        """
        config = parse_config(config_file, section)
        if "address" not in config:
            raise InvalidAddress(
                f"No address in section [{section}] of '{config_file}'."
            )
        timeout = config.get("timeout")
        return cls(
            config["address"], timeout=float(timeout) if timeout is not None else None
        )

    @property
    def closed(self) -> bool:
        return self.transport.closed

    def write(self, point: Point) -> None:
        """Encode a point and send it to Telegraf.

        Args:
            point: The point to write.

        Raises:
            EncodingError: If the point cannot be encoded. Nothing is sent and
                the connection is unaffected.
            DeliveryError: If the point could not be delivered.
        """
        frame = encode_point(point)
        self.transport.send(frame)

    # older name of write
    write_point = write

    def write_metric(self, metric: Metric) -> None:
        """Write an object that can convert itself to a point."""
        self.write(metric.to_point())

    def close(self) -> None:
        """Close the connection."""
        self.transport.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Client {self.transport!r}>"
