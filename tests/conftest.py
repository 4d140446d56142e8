"""Shared fixtures: loopback listeners standing in for a Telegraf socket listener."""

import os
import socket
import tempfile

import pytest

TIMEOUT = 5


def recv_line(connection: socket.socket) -> bytes:
    """Read from a stream socket up to and including the next newline."""
    data = b""
    while not data.endswith(b"\n"):
        chunk = connection.recv(1)
        if not chunk:
            break
        data += chunk
    return data


class BrokenSocket:
    """Stands in for a connected socket whose every send fails."""

    def __init__(self, error: OSError) -> None:
        self.error = error
        self.closed = False

    def sendall(self, data: bytes) -> None:
        raise self.error

    def send(self, data: bytes) -> int:
        raise self.error

    def recv(self, size: int, flags: int = 0) -> bytes:
        # nothing to read, the peer looks alive until a write is attempted
        raise BlockingIOError()

    def gettimeout(self):
        return None

    def settimeout(self, timeout) -> None:
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def socket_dir():
    # AF_UNIX paths are limited to ~100 characters, tmp_path can be longer
    with tempfile.TemporaryDirectory(prefix="tgc") as directory:
        yield directory


@pytest.fixture
def tcp_server():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server.bind(("127.0.0.1", 0))
    server.listen(5)
    server.settimeout(TIMEOUT)
    yield server
    server.close()


@pytest.fixture
def tcp_address(tcp_server) -> str:
    host, port = tcp_server.getsockname()
    return f"tcp://{host}:{port}"


@pytest.fixture
def udp_server():
    server = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    server.bind(("127.0.0.1", 0))
    server.settimeout(TIMEOUT)
    yield server
    server.close()


@pytest.fixture
def udp_address(udp_server) -> str:
    host, port = udp_server.getsockname()
    return f"udp://{host}:{port}"


@pytest.fixture
def unix_server(socket_dir):
    path = os.path.join(socket_dir, "stream.sock")
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    server.bind(path)
    server.listen(5)
    server.settimeout(TIMEOUT)
    yield server
    server.close()


@pytest.fixture
def unixgram_server(socket_dir):
    path = os.path.join(socket_dir, "dgram.sock")
    server = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    server.bind(path)
    server.settimeout(TIMEOUT)
    yield server
    server.close()


@pytest.fixture
def refused_tcp_address() -> str:
    # bind and release a port so that nothing listens on it
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    host, port = probe.getsockname()
    probe.close()
    return f"tcp://{host}:{port}"
