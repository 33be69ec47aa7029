"""Client configuration"""
from .protocol import metric_prefix, normalize_tags, TagEntry
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Tuple

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8125

# option name <--> config field mapping for the alternative spellings
OPTION_ALIASES: Dict[str, str] = {
    "throw_exceptions": "throw_on_failure",
    "datadog": "use_extended_dialect",
    "tags": "default_tags",
}


def _validate_host(value):
    if not isinstance(value, str) or not value:
        raise ValueError("Host must be a non-empty string, got {!r}".format(value))
    return value


def _validate_port(value):
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as ex:
            raise ValueError("Port is out of range") from ex
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 65535:
        raise ValueError("Port is out of range")
    return value


def _validate_namespace(value):
    if not isinstance(value, str):
        raise ValueError("Namespace must be a string, got {!r}".format(value))
    return value


def _validate_timeout(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ValueError("Timeout must be a non-negative number of seconds, got {!r}".format(value))
    return value


def _validate_flag(value):
    if not isinstance(value, bool):
        raise ValueError("Expected a boolean, got {!r}".format(value))
    return value


def _validate_tags(value):
    try:
        return normalize_tags(value)
    except (TypeError, ValueError) as ex:
        raise ValueError("Invalid tags {!r}".format(value)) from ex


_VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    "host": _validate_host,
    "port": _validate_port,
    "namespace": _validate_namespace,
    "timeout": _validate_timeout,
    "throw_on_failure": _validate_flag,
    "use_extended_dialect": _validate_flag,
    "default_tags": _validate_tags,
}


class ClientConfig(NamedTuple):
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    namespace: str = ""
    timeout: Optional[float] = None
    throw_on_failure: bool = True
    use_extended_dialect: bool = True
    default_tags: Tuple[TagEntry, ...] = ()

    @property
    def prefix(self) -> str:
        return metric_prefix(self.namespace)

    def with_options(self, options: Mapping[str, Any]) -> "ClientConfig":
        """Return a copy with the given options applied, raises ValueError on invalid values

        Options set to None keep their current value.
        """
        changes = {}
        for name, value in options.items():
            field = OPTION_ALIASES.get(name, name)
            if field not in _VALIDATORS:
                raise ValueError("Unknown configuration option {!r}".format(name))
            if value is None:
                continue
            try:
                changes[field] = _VALIDATORS[field](value)
            except ValueError as ex:
                raise ValueError("{}: {}".format(field, ex)) from ex
        return self._replace(**changes)
