# Copyright 2019, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""
DogStatsD client

Sends StatsD metrics plus DataDog's events and service checks, one UDP
datagram per call:

  https://docs.datadoghq.com/developers/dogstatsd/datagram_shell/

"""
from . import protocol
from .config import ClientConfig
from .errors import ConfigurationError, StatsdConnectionError
from .protocol import TagsType
from .transport import DatagramTransport
from .types import ServiceCheckStatus
from typing import Any, Callable, Iterable, List, Mapping, Optional, SupportsFloat, Union

import contextlib
import logging
import random
import time
import uuid

MetricsType = Union[str, Iterable[str]]


class MetricsClient:
    def __init__(
        self,
        instance_id: Optional[str] = None,
        *,
        transport=None,
        random_source: Callable[[], float] = random.random,
        clock: Callable[[], float] = time.monotonic,
        **options: Any
    ) -> None:
        self.instance_id = instance_id or uuid.uuid4().hex
        self.log = logging.getLogger("MetricsClient:{}".format(self.instance_id))
        self._transport = transport or DatagramTransport()
        self._random = random_source
        self._clock = clock
        self._config = ClientConfig()
        self._message = ""
        if options:
            self.configure(**options)

    def __str__(self) -> str:
        return "MetricsClient::[{}]".format(self.instance_id)

    def configure(self, **options: Any) -> "MetricsClient":
        """Apply configuration options

        Recognized options: host, port, namespace, timeout, throw_on_failure
        (or throw_exceptions), use_extended_dialect (or datadog) and
        default_tags (or tags). The current configuration is kept if any of
        the options is invalid.
        """
        try:
            config = self._config.with_options(options)
        except ValueError as ex:
            raise ConfigurationError(self, str(ex)) from ex
        self._config = config
        self.log.debug("Configured with %r", config)
        return self

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def namespace(self) -> str:
        return self._config.namespace

    @property
    def last_message(self) -> str:
        return self._message

    def _sampled(self, sample_rate: float) -> bool:
        return self._random() <= sample_rate

    def increment(
        self, metrics: MetricsType, delta: int = 1, sample_rate: float = 1.0, tags: Optional[TagsType] = None
    ) -> "MetricsClient":
        if isinstance(metrics, str):
            metrics = [metrics]

        data = []
        if sample_rate < 1.0:
            for metric in metrics:
                if self._sampled(sample_rate):
                    data.append((metric, delta, sample_rate))
        else:
            data = [(metric, delta, None) for metric in metrics]
        return self._send("c", data, tags)

    def decrement(
        self, metrics: MetricsType, delta: int = 1, sample_rate: float = 1.0, tags: Optional[TagsType] = None
    ) -> "MetricsClient":
        return self.increment(metrics, -delta, sample_rate, tags)

    def timing(self, metric: str, time_ms: SupportsFloat, tags: Optional[TagsType] = None) -> "MetricsClient":
        return self._send("ms", [(metric, time_ms, None)], tags)

    def time(self, metric: str, func: Callable[[], Any], tags: Optional[TagsType] = None) -> "MetricsClient":
        """Time a call to func and send the duration in milliseconds"""
        start_time = self._clock()
        func()
        return self.timing(metric, round((self._clock() - start_time) * 1000, 4), tags)

    @contextlib.contextmanager
    def timed(self, metric: str, tags: Optional[TagsType] = None):
        start_time = self._clock()
        yield self
        self.timing(metric, round((self._clock() - start_time) * 1000, 4), tags)

    def gauge(self, metric: str, value: SupportsFloat, tags: Optional[TagsType] = None) -> "MetricsClient":
        return self._send("g", [(metric, value, None)], tags)

    def histogram(
        self, metric: str, value: SupportsFloat, sample_rate: float = 1.0, tags: Optional[TagsType] = None
    ) -> "MetricsClient":
        data = []
        if sample_rate < 1.0:
            if self._sampled(sample_rate):
                data.append((metric, value, sample_rate))
        else:
            data.append((metric, value, None))
        return self._send("h", data, tags)

    def set(self, metric: str, value: Any, tags: Optional[TagsType] = None) -> "MetricsClient":
        """Count the number of unique values seen for metric"""
        return self._send("s", [(metric, value, None)], tags)

    def unexpected_exception(self, ex: BaseException, where: str, tags: Optional[TagsType] = None) -> "MetricsClient":
        all_tags = protocol.merge_tags(
            protocol.normalize_tags(tags), [("exception", ex.__class__.__name__), ("where", where)]
        )
        return self.increment("exception", tags=all_tags)

    def event(
        self,
        title: str,
        text: str,
        metadata: Optional[Mapping[str, Any]] = None,
        tags: Optional[TagsType] = None,
    ) -> "MetricsClient":
        """Send an event

        metadata may contain:
          - time: timestamp (int or datetime) of the event
          - hostname: host the event belongs to
          - key: aggregation key grouping events together
          - priority: EventPriority or 'normal'/'low'
          - source: source type name
          - alert: EventAlertType or 'error'/'warning'/'info'/'success'
        """
        config = self._config
        if not config.use_extended_dialect:
            return self

        return self._send_messages(
            [
                protocol.encode_event(
                    title, text, prefix=config.prefix, metadata=metadata, tags=self._format_tags(config, tags)
                )
            ]
        )

    def service_check(
        self,
        name: str,
        status: Union[ServiceCheckStatus, int],
        metadata: Optional[Mapping[str, Any]] = None,
        tags: Optional[TagsType] = None,
    ) -> "MetricsClient":
        """Send a service check, metadata may contain time, hostname and message"""
        config = self._config
        if not config.use_extended_dialect:
            return self

        return self._send_messages(
            [
                protocol.encode_service_check(
                    name, status, prefix=config.prefix, metadata=metadata, tags=self._format_tags(config, tags)
                )
            ]
        )

    @staticmethod
    def _format_tags(config: ClientConfig, tags: Optional[TagsType]) -> str:
        return protocol.format_tags(
            protocol.merge_tags(config.default_tags, tags), extended=config.use_extended_dialect
        )

    def _send(self, metric_type: str, data: List[tuple], tags: Optional[TagsType]) -> "MetricsClient":
        config = self._config
        formatted_tags = self._format_tags(config, tags)
        messages = [
            protocol.encode_metric(
                metric, value, metric_type, prefix=config.prefix, sample_rate=sample_rate, tags=formatted_tags
            )
            for metric, value, sample_rate in data
        ]
        return self._send_messages(messages)

    def _send_messages(self, messages: List[str]) -> "MetricsClient":
        config = self._config
        try:
            channel = self._transport.open(config.host, config.port, config.timeout)
        except OSError as ex:
            if config.throw_on_failure:
                strerror = ex.strerror or str(ex)
                message = strerror if ex.errno is None else "({}) {}".format(ex.errno, strerror)
                raise StatsdConnectionError(self, message, errno=ex.errno, strerror=strerror) from ex
            self.log.warning("StatsD server connection failed (udp://%s:%d): %r", config.host, config.port, ex)
            return self

        self._message = "\n".join(messages)
        try:
            channel.send(self._message.encode("utf-8"))
        except OSError as ex:
            self.log.debug("Failed to send %d bytes to %s:%d: %r", len(self._message), config.host, config.port, ex)
        finally:
            channel.close()
        return self
