# Copyright 2019, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
from typing import Optional

import socket


class DatagramTransport:
    """Opens a connected UDP socket per send"""

    socket_proto = socket.SOCK_DGRAM

    def open(self, host: str, port: int, timeout: Optional[float] = None) -> socket.socket:
        """Return a socket connected to host:port, raises OSError if none of the addresses work"""
        if timeout is None:
            timeout = socket.getdefaulttimeout()

        last_connection_error: Optional[OSError] = None
        for addr_info in socket.getaddrinfo(host, port, socket.AF_UNSPEC, self.socket_proto):
            family, sock_type, sock_proto, _, sock_addr = addr_info
            sock = socket.socket(family, sock_type, sock_proto)
            try:
                sock.settimeout(timeout)
                sock.connect(sock_addr)
                return sock
            except OSError as ex:
                sock.close()
                last_connection_error = ex

        if last_connection_error is None:
            raise OSError("No usable address for {}:{}".format(host, port))
        raise last_connection_error
