# Copyright 2019, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
from .client import MetricsClient
from .config import ClientConfig
from .errors import ClientError, ConfigurationError, StatsdConnectionError
from .registry import ClientRegistry, instance
from .transport import DatagramTransport
from .types import EventAlertType, EventPriority, ServiceCheckStatus

__version__ = "1.0.0"

__all__ = [
    "ClientConfig",
    "ClientError",
    "ClientRegistry",
    "ConfigurationError",
    "DatagramTransport",
    "EventAlertType",
    "EventPriority",
    "instance",
    "MetricsClient",
    "ServiceCheckStatus",
    "StatsdConnectionError",
]
