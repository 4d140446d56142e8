"""Write the system load average to Telegraf every few seconds.

Telegraf needs a socket listener, e.g.

    [[inputs.socket_listener]]
      service_address = "udp://:8094"
"""

import os
import socket
import time
from dataclasses import dataclass, field

from telegraf_client import Client, point_from_dataclass

INTERVAL = 5


@dataclass
class LoadAverage:
    __measurement__ = "load"

    load1: float
    load5: float
    load15: float
    host: str = field(default=socket.gethostname(), metadata={"telegraf": "tag"})


if __name__ == "__main__":
    with Client("udp://localhost:8094") as client:
        while True:
            client.write(point_from_dataclass(LoadAverage(*os.getloadavg())))
            time.sleep(INTERVAL)
