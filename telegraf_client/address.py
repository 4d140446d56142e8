"""Connection address dataclass and parsing."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from .exceptions import InvalidAddress

TCP = "tcp"
UDP = "udp"
UNIX = "unix"
UNIXGRAM = "unixgram"

NETWORK_SCHEMES = (TCP, UDP)
UNIX_SCHEMES = (UNIX, UNIXGRAM)
SCHEMES = NETWORK_SCHEMES + UNIX_SCHEMES


@dataclass(eq=True, frozen=True)
class Address:
    """Location of a Telegraf socket listener.

    Network schemes use host and port, Unix schemes use path.
    """

    scheme: str
    host: Optional[str] = None
    port: Optional[int] = None
    path: Optional[str] = None

    @property
    def is_unix(self) -> bool:
        return self.scheme in UNIX_SCHEMES

    def __str__(self) -> str:
        if self.is_unix:
            return f"{self.scheme}://{self.path}"
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}"


def parse_address(address: str) -> Address:
    """Create an Address from a connection string.

    Args:
        address: Connection string of the form <scheme>://<address>, e.g.
            tcp://localhost:8094, udp://[::1]:8092, unix:///tmp/telegraf.sock or
            unixgram:///tmp/telegraf.sock.

    Returns:
        Address dataclass.

    Raises:
        InvalidAddress: If the scheme is unknown or the address is malformed.
    """
    scheme, separator, location = address.partition("://")
    scheme = scheme.lower()
    if not separator:
        raise InvalidAddress(f"'{address}' has no scheme, expected <scheme>://...")
    if scheme not in SCHEMES:
        raise InvalidAddress(
            f"Unknown scheme '{scheme}' in '{address}', "
            f"expected one of {', '.join(SCHEMES)}."
        )

    if scheme in UNIX_SCHEMES:
        if not location:
            raise InvalidAddress(f"'{address}' has no socket path.")
        return Address(scheme=scheme, path=location)

    split = urlsplit(f"//{location}")
    try:
        port = split.port
    except ValueError as error:
        raise InvalidAddress(f"'{address}' has an invalid port.") from error
    if not split.hostname:
        raise InvalidAddress(f"'{address}' has no host.")
    if port is None:
        raise InvalidAddress(f"'{address}' has no port.")
    if split.path or split.query or split.fragment:
        raise InvalidAddress(f"'{address}' is not of the form host:port.")
    return Address(scheme=scheme, host=split.hostname, port=port)
