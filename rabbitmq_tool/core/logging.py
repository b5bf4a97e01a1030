"""
Structured Logging для RabbitMQ Tool.

Логи пишутся в stderr: stdout занят snapshot JSON и отчётом diff
(`schema fetch > schema.json` должен давать чистый файл).

Консоль по умолчанию human-readable, с --json-logs тоже JSON.
Файл (logging.file_path) пишется с ротацией по размеру или по времени.

Пример:
    from rabbitmq_tool.core.logging import LogConfig, setup_logging_from_config, get_logger

    setup_logging_from_config(LogConfig(level=logging.DEBUG))

    log = get_logger(__name__).bind(stage="queues")
    log.info("'/orders' queue is created.", entity="'/orders'")

Строка human-формата:
    2025-12-27 10:30:15 - INFO     - [2025-12-27T10-30-00] '/orders' queue is created. (stage=queues, entity='/orders')
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass
from enum import Enum

# Поля контекста, которые форматтеры выводят отдельно от сообщения
CONTEXT_FIELDS = ("vhost", "stage", "entity", "operation")

# Сторонние логгеры, которые шумят на INFO (urllib3 пишет каждый запрос)
NOISY_LOGGERS = ("urllib3",)

_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class RotationType(str, Enum):
    """Тип ротации файла логов."""
    SIZE = "size"
    TIME = "time"
    NONE = "none"


@dataclass
class LogConfig:
    """
    Настройки логирования (секция logging в config.yaml).

    json_format относится к файлу, console_json к консоли.
    when/interval используются только при rotation=time,
    max_bytes только при rotation=size.
    """
    level: int = logging.INFO
    json_format: bool = False
    console: bool = True
    console_json: bool = False
    file_path: Optional[str] = None
    rotation: RotationType = RotationType.SIZE
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    when: str = "midnight"
    interval: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogConfig":
        """Уровень и тип ротации принимаются строками ("debug", "time")."""
        values = {key: value for key, value in data.items() if key in cls.__dataclass_fields__}

        level = values.get("level", logging.INFO)
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            values["level"] = level if isinstance(level, int) else logging.INFO

        if "rotation" in values:
            values["rotation"] = RotationType(values["rotation"])

        return cls(**values)


def _context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if getattr(record, name, None)}


class JSONFormatter(logging.Formatter):
    """
    Одна запись = один JSON объект.

    Поля: timestamp, level, logger, message, run_id, поля контекста
    и любые другие extra, переданные в запись.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_") or value is None:
                continue
            log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """TIMESTAMP - LEVEL - [run_id] [DRY-RUN] MESSAGE (vhost=..., stage=..., entity=...)"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        prefix = ""
        run_id = getattr(record, "run_id", None)
        if run_id and run_id != "-":
            prefix += f"[{run_id}] "
        if getattr(record, "dry_run", False):
            prefix += "[DRY-RUN] "

        fields = ", ".join(f"{name}={value}" for name, value in _context_fields(record).items())
        suffix = f" ({fields})" if fields else ""

        line = f"{timestamp} - {record.levelname:<8} - {prefix}{record.getMessage()}{suffix}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger:
    """
    Логгер с именованными полями контекста.

        log = get_logger(__name__).bind(stage="bindings")
        log.warning("Unsupported destination type", entity=title)

    run_id подставляется из текущего RunContext, если не задан через bind().
    """

    def __init__(self, name: str, default_extra: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(name)
        self._default_extra = dict(default_extra or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Новый логгер с дополнительными полями по умолчанию."""
        return StructuredLogger(self.name, default_extra={**self._default_extra, **fields})

    def log(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return

        extra = {**self._default_extra, **fields}
        if "run_id" not in extra:
            from .context import get_current_context
            ctx = get_current_context()
            if ctx:
                extra["run_id"] = ctx.run_id

        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, exc_info: bool = False, **fields: Any) -> None:
        self.log(logging.ERROR, message, exc_info=exc_info, **fields)

    def critical(self, message: str, exc_info: bool = False, **fields: Any) -> None:
        self.log(logging.CRITICAL, message, exc_info=exc_info, **fields)


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """StructuredLogger для модуля (кэшируется по имени)."""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def _file_handler(config: LogConfig) -> logging.Handler:
    """FileHandler с ротацией из LogConfig. Директория создаётся."""
    Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)

    if config.rotation == RotationType.SIZE:
        return logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    if config.rotation == RotationType.TIME:
        return logging.handlers.TimedRotatingFileHandler(
            config.file_path,
            when=config.when,
            interval=config.interval,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    return logging.FileHandler(config.file_path, encoding="utf-8")


def _install(handlers: List[logging.Handler], level: int) -> None:
    """Заменяет handlers root логгера."""
    from .context import RunContextFilter

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(RunContextFilter())
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Запросы urllib3 видны только в -v
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)


def setup_logging_from_config(config: LogConfig, stream: Any = None) -> None:
    """
    Настраивает root логгер по LogConfig.

    Args:
        config: LogConfig с настройками
        stream: Поток для консоли (по умолчанию sys.stderr)
    """
    handlers: List[logging.Handler] = []

    if config.console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(JSONFormatter() if config.console_json else HumanFormatter())
        handlers.append(console_handler)

    if config.file_path:
        file_handler = _file_handler(config)
        file_handler.setFormatter(JSONFormatter() if config.json_format else HumanFormatter())
        handlers.append(file_handler)

    _install(handlers, config.level)


def setup_logging(
    json_format: bool = False,
    level: int = logging.INFO,
    stream: Any = None,
) -> None:
    """Только консоль. Используется до загрузки конфигурации."""
    setup_logging_from_config(
        LogConfig(level=level, console_json=json_format),
        stream=stream,
    )
