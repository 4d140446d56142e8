"""Socket transports for delivering encoded points to a Telegraf socket listener."""

import logging
import socket
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, Type, Union

from .address import TCP, UDP, UNIX, UNIXGRAM, Address, parse_address
from .exceptions import ConnectionFailed, DeliveryError, InvalidAddress

logger = logging.getLogger("telegraf_client.transport")

# errors meaning the peer has gone away, a stream transport reconnects once
PEER_CLOSED_ERRORS = (BrokenPipeError, ConnectionResetError, ConnectionAbortedError)


class Transport(ABC):
    """A single socket connected to a Telegraf socket listener.

    Args:
        address: Address of the listener, either parsed or as a connection
            string like tcp://localhost:8094.
        timeout: Optional timeout in seconds applied to the socket. None leaves
            the socket blocking.

    Attributes:
        address: The parsed address.
        timeout: Socket timeout in seconds or None.
    """

    scheme: str
    socket_type: int

    def __init__(
        self, address: Union[Address, str], timeout: Optional[float] = None
    ) -> None:
        if isinstance(address, str):
            address = parse_address(address)
        if address.scheme != self.scheme:
            raise InvalidAddress(
                f"{type(self).__name__} cannot connect to '{address}', "
                f"expected a {self.scheme}:// address."
            )
        self.address = address
        self.timeout = timeout
        self._socket: Optional[socket.socket] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        """Whether the transport currently holds a connected socket."""
        return self._socket is not None

    @property
    def closed(self) -> bool:
        """Whether the transport has been closed by its owner."""
        return self._closed

    def open(self) -> None:
        """Resolve the address and connect a new socket.

        An already open socket is closed first.

        Raises:
            ConnectionFailed: If the address cannot be resolved or no socket
                could be connected.
        """
        self._drop_socket()
        self._socket = self._connect()
        self._closed = False
        logger.debug(f"Opened connection to {self.address}.")

    def close(self) -> None:
        """Close the socket. Closing twice is harmless."""
        if self._socket is not None:
            logger.debug(f"Closing connection to {self.address}.")
        self._drop_socket()
        self._closed = True

    @abstractmethod
    def send(self, frame: bytes) -> None:
        """Send one encoded frame.

        Raises:
            DeliveryError: If the frame could not be delivered.
        """

    def _resolve(self) -> List[Tuple[int, Union[str, tuple]]]:
        # (family, sockaddr) candidates, tried in order
        if self.address.is_unix:
            return [(socket.AF_UNIX, self.address.path)]
        try:
            infos = socket.getaddrinfo(
                self.address.host, self.address.port, type=self.socket_type
            )
        except socket.gaierror as error:
            raise ConnectionFailed(
                f"Could not resolve {self.address}: {error}"
            ) from error
        return [(family, sockaddr) for family, _, _, _, sockaddr in infos]

    def _connect(self) -> socket.socket:
        last_error = None
        for family, sockaddr in self._resolve():
            sock = socket.socket(family, self.socket_type)
            try:
                sock.settimeout(self.timeout)
                sock.connect(sockaddr)
            except OSError as error:
                sock.close()
                last_error = error
                continue
            return sock
        raise ConnectionFailed(
            f"Could not connect to {self.address}: {last_error}"
        ) from last_error

    def _drop_socket(self) -> None:
        sock, self._socket = self._socket, None
        if sock is not None:
            sock.close()

    def _check_not_closed(self) -> None:
        if self._closed:
            raise DeliveryError(f"Connection to {self.address} has been closed.")

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open" if self.is_open else "unconnected"
        return f"<{type(self).__name__} {self.address} ({state})>"


class StreamTransport(Transport):
    """Connection oriented transport.

    If the peer has closed the connection, the transport reconnects once and
    retries the write. A close is detected before writing by peeking at the
    socket, since the first write after a close would otherwise be accepted
    by the kernel and lost. A second failure is reported as a DeliveryError
    and the socket is left closed, so the next send starts with a fresh
    connection.
    """

    socket_type = socket.SOCK_STREAM

    def send(self, frame: bytes) -> None:
        self._check_not_closed()
        if self._socket is None:
            logger.info(f"Not connected to {self.address}, reconnecting.")
        elif self._peer_closed():
            logger.warning(
                f"Connection to {self.address} closed by peer, reconnecting."
            )
        else:
            try:
                self._socket.sendall(frame)
            except PEER_CLOSED_ERRORS as error:
                logger.warning(
                    f"Connection to {self.address} closed by peer ({error}), "
                    "reconnecting."
                )
            except OSError as error:
                # a partial write leaves the stream unusable
                self._drop_socket()
                raise DeliveryError(
                    f"Could not send to {self.address}: {error}"
                ) from error
            else:
                logger.debug(f"Sent {len(frame)} bytes to {self.address}.")
                return

        try:
            self.open()
            self._socket.sendall(frame)
        except OSError as error:  # ConnectionFailed included
            self._drop_socket()
            raise DeliveryError(
                f"Could not send to {self.address} after reconnecting: {error}"
            ) from error
        logger.debug(f"Sent {len(frame)} bytes to {self.address} after reconnecting.")

    def _peer_closed(self) -> bool:
        # Telegraf never writes back, so a readable socket means EOF or a reset
        timeout = self._socket.gettimeout()
        self._socket.settimeout(0)
        try:
            return self._socket.recv(1, socket.MSG_PEEK) == b""
        except BlockingIOError:
            return False
        except PEER_CLOSED_ERRORS:
            return True
        except OSError as error:
            self._drop_socket()
            raise DeliveryError(f"Could not send to {self.address}: {error}") from error
        finally:
            if self._socket is not None:
                self._socket.settimeout(timeout)


class DatagramTransport(Transport):
    """Connectionless transport, every frame is sent as a single packet.

    There is no reconnect, a failed send is reported immediately. Packet size
    limits of the OS or the agent are not checked.
    """

    socket_type = socket.SOCK_DGRAM

    def send(self, frame: bytes) -> None:
        self._check_not_closed()
        if self._socket is None:
            raise DeliveryError(f"Transport to {self.address} is not open.")
        try:
            sent = self._socket.send(frame)
        except OSError as error:
            raise DeliveryError(f"Could not send to {self.address}: {error}") from error
        if sent != len(frame):
            raise DeliveryError(
                f"Only {sent} of {len(frame)} bytes sent to {self.address}."
            )
        logger.debug(f"Sent {len(frame)} bytes to {self.address}.")


class TcpTransport(StreamTransport):
    """TCP connection to host:port."""

    scheme = TCP


class UdpTransport(DatagramTransport):
    """UDP socket sending to host:port."""

    scheme = UDP


class UnixTransport(StreamTransport):
    """Unix domain stream socket."""

    scheme = UNIX


class UnixgramTransport(DatagramTransport):
    """Unix domain datagram socket."""

    scheme = UNIXGRAM


TRANSPORTS: dict[str, Type[Transport]] = {
    TCP: TcpTransport,
    UDP: UdpTransport,
    UNIX: UnixTransport,
    UNIXGRAM: UnixgramTransport,
}


def create_transport(
    address: Union[Address, str], timeout: Optional[float] = None
) -> Transport:
    """Create and open the transport matching the scheme of an address.

    Args:
        address: Connection string or parsed Address.
        timeout: Optional socket timeout in seconds.

    Returns:
        An open transport.

    Raises:
        InvalidAddress: If the address cannot be parsed.
        ConnectionFailed: If the socket cannot be opened.
    """
    if isinstance(address, str):
        address = parse_address(address)
    transport = TRANSPORTS[address.scheme](address, timeout=timeout)
    transport.open()
    return transport
