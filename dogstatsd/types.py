"""DogStatsD client types"""

import enum


class StrEnum(str, enum.Enum):
    def __str__(self):
        return str(self.value)


class ServiceCheckStatus(enum.IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    def __str__(self):
        return str(self.value)


class EventPriority(StrEnum):
    LOW = "low"
    NORMAL = "normal"


class EventAlertType(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"
