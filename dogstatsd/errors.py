class ClientError(Exception):
    """Error raised on behalf of a MetricsClient"""

    def __init__(self, instance, message=""):
        super().__init__(message)
        self.instance = instance


class ConfigurationError(ClientError):
    """Invalid client configuration"""


class StatsdConnectionError(ClientError):
    """Opening the channel to the StatsD server failed"""

    def __init__(self, instance, message="", *, errno=None, strerror=None):
        super().__init__(instance, message)
        self.errno = errno
        self.strerror = strerror
