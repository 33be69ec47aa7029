from dogstatsd import MetricsClient
from typing import List
from unittest.mock import Mock

import pytest
import socket


class UdpReceiver:
    """Local UDP socket standing in for the StatsD server"""

    def __init__(self):
        self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.socket.bind(("127.0.0.1", 0))
        self.socket.settimeout(5.0)
        self.port = self.socket.getsockname()[1]

    def receive(self) -> str:
        data, _ = self.socket.recvfrom(65535)
        return data.decode("utf-8")

    def close(self):
        self.socket.close()


class RecordingTransport:
    """Transport collecting the payloads written instead of sending them"""

    def __init__(self):
        self.opened = []
        self.channel = Mock(spec=socket.socket)

    def open(self, host, port, timeout=None):
        self.opened.append((host, port, timeout))
        return self.channel

    @property
    def payloads(self) -> List[str]:
        return [call.args[0].decode("utf-8") for call in self.channel.send.call_args_list]


@pytest.fixture(name="udp_receiver")
def fixture_udp_receiver():
    receiver = UdpReceiver()
    yield receiver
    receiver.close()


@pytest.fixture(name="transport")
def fixture_transport():
    return RecordingTransport()


@pytest.fixture(name="client")
def fixture_client(transport):
    return MetricsClient("test", transport=transport)
