# runegather/utils/logger.py
import datetime
from typing import Union

class LogLevel:
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4 # Collaborator faults the session cannot recover from

    NAMES = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARN",
        ERROR: "ERROR",
        CRITICAL: "CRIT",
    }

    @classmethod
    def parse(cls, value: Union[int, str]) -> int:
        """Accepts a level constant or a name such as 'info' / 'WARN'."""
        if isinstance(value, int):
            return value
        wanted = value.strip().upper()
        for level, name in cls.NAMES.items():
            if name == wanted or (wanted == "WARNING" and level == cls.WARNING):
                return level
        raise ValueError(f"Unknown log level: {value}")

class Logger:
    _instance = None
    _level = LogLevel.INFO

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
        return cls._instance

    @classmethod
    def set_level(cls, level: Union[int, str]):
        """Sets the minimum logging level."""
        cls._level = LogLevel.parse(level)

    @classmethod
    def get_level(cls) -> int:
        return cls._level

    @classmethod
    def is_enabled(cls, level: int) -> bool:
        return level >= cls._level

    @classmethod
    def _log(cls, level: int, source: str, message: str):
        if not cls.is_enabled(level):
            return
        timestamp = datetime.datetime.now().strftime("%H:%M:%S")
        level_name = LogLevel.NAMES.get(level, "LOG")
        # Format: [TIME] [LEVEL] [Source] Message
        print(f"[{timestamp}] [{level_name:<5}] [{source}] {message}")

    @classmethod
    def debug(cls, source: str, message: str):
        cls._log(LogLevel.DEBUG, source, message)

    @classmethod
    def info(cls, source: str, message: str):
        cls._log(LogLevel.INFO, source, message)

    @classmethod
    def warning(cls, source: str, message: str):
        cls._log(LogLevel.WARNING, source, message)

    @classmethod
    def error(cls, source: str, message: str):
        cls._log(LogLevel.ERROR, source, message)

    @classmethod
    def critical(cls, source: str, message: str):
        cls._log(LogLevel.CRITICAL, source, message)
