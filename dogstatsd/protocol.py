# Copyright 2019, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""
DogStatsD wire format

Plain StatsD metric lines plus DataDog's extensions for tags, events and
service checks:

  https://docs.datadoghq.com/developers/dogstatsd/datagram_shell/

"""
from .types import ServiceCheckStatus
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

import datetime

TagEntry = Union[str, Tuple[str, str]]
TagsType = Union[Mapping[str, Any], Iterable[Union[str, Tuple[str, Any]]]]

# (metadata key, wire code) in emission order
EVENT_METADATA = (
    ("time", "d"),
    ("hostname", "h"),
    ("key", "k"),
    ("priority", "p"),
    ("source", "s"),
    ("alert", "t"),
)
SERVICE_CHECK_METADATA = (
    ("time", "d"),
    ("hostname", "h"),
)
# the message has to come after the tags
SERVICE_CHECK_MESSAGE = (("message", "m"),)


def normalize_tags(tags: Optional[TagsType] = None) -> Tuple[TagEntry, ...]:
    """Turn a mapping or a sequence of bare/keyed tags into a tuple of entries"""
    if tags is None:
        return ()
    if isinstance(tags, str):
        return (tags,)
    if isinstance(tags, Mapping):
        return tuple((str(key), str(value)) for key, value in tags.items())

    entries = []
    for tag in tags:
        if isinstance(tag, str):
            entries.append(tag)
        else:
            key, value = tag
            entries.append((str(key), str(value)))
    return tuple(entries)


def merge_tags(default_tags: Iterable[TagEntry], tags: Optional[TagsType] = None) -> Tuple[TagEntry, ...]:
    """Keyed tags override keyed defaults in place, everything else is appended"""
    merged = list(default_tags)
    keyed = {entry[0]: index for index, entry in enumerate(merged) if not isinstance(entry, str)}
    for entry in normalize_tags(tags):
        if isinstance(entry, str):
            merged.append(entry)
        elif entry[0] in keyed:
            merged[keyed[entry[0]]] = entry
        else:
            keyed[entry[0]] = len(merged)
            merged.append(entry)
    return tuple(merged)


def format_tags(tags: Iterable[TagEntry], *, extended: bool = True) -> str:
    if not extended:
        return ""
    result = [entry if isinstance(entry, str) else "{}:{}".format(*entry) for entry in tags]
    if not result:
        return ""
    return "|#{}".format(",".join(result))


def metric_prefix(namespace: str) -> str:
    return "{}.".format(namespace) if namespace else ""


def encode_metric(
    metric: str, value: Any, metric_type: str, *, prefix: str = "", sample_rate: Optional[float] = None, tags: str = ""
) -> str:
    # format: "page.views:1|c|@0.5|#env:prod"
    data = "{}{}:{}|{}".format(prefix, metric, value, metric_type)
    if sample_rate is not None:
        data += "|@{}".format(sample_rate)
    return data + tags


def sanitize_event_text(text: str) -> str:
    return text.replace("\r", "").replace("\n", "\\n")


def _metadata_value(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return str(int(value.timestamp()))
    return str(value)


def _format_metadata(metadata: Mapping[str, Any], definition: Tuple[Tuple[str, str], ...]) -> str:
    data = ""
    for key, code in definition:
        value = metadata.get(key)
        if value is not None:
            data += "|{}:{}".format(code, _metadata_value(value))
    return data


def encode_event(
    title: str, text: str, *, prefix: str = "", metadata: Optional[Mapping[str, Any]] = None, tags: str = ""
) -> str:
    """Build an event line, title and text lengths are counted in bytes"""
    text = sanitize_event_text(text)
    header = "_e{{{},{}}}".format(len(title.encode("utf-8")), len(text.encode("utf-8")))
    return "{}:{}{}|{}{}{}".format(header, prefix, title, text, _format_metadata(metadata or {}, EVENT_METADATA), tags)


def encode_service_check(
    name: str,
    status: Union[ServiceCheckStatus, int],
    *,
    prefix: str = "",
    metadata: Optional[Mapping[str, Any]] = None,
    tags: str = ""
) -> str:
    status = ServiceCheckStatus(status)
    metadata = metadata or {}
    return "_sc|{}{}|{}{}{}{}".format(
        prefix,
        name,
        int(status),
        _format_metadata(metadata, SERVICE_CHECK_METADATA),
        tags,
        _format_metadata(metadata, SERVICE_CHECK_MESSAGE),
    )
