from .client import MetricsClient
from threading import Lock
from typing import Callable, Dict

DEFAULT_INSTANCE = "default"


class ClientRegistry:
    """Named MetricsClient instances, created on first lookup"""

    def __init__(self, factory: Callable[[str], MetricsClient] = MetricsClient) -> None:
        self._factory = factory
        self._instances: Dict[str, MetricsClient] = {}
        self.lock = Lock()

    def __contains__(self, name: str) -> bool:
        return name in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def get(self, name: str = DEFAULT_INSTANCE) -> MetricsClient:
        client = self._instances.get(name)
        if client is None:
            with self.lock:  # pylint: disable=not-context-manager
                client = self._instances.get(name)
                if client is None:
                    client = self._factory(name)
                    self._instances[name] = client
        return client


_default_registry = ClientRegistry()


def instance(name: str = DEFAULT_INSTANCE) -> MetricsClient:
    """Return the process-wide client registered under name"""
    return _default_registry.get(name)
