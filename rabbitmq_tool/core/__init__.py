"""
Core модули RabbitMQ Tool.

- models: VHost, Exchange, Queue, Binding, Schema
- domain: diff, правила сравнения, проверка MassTransit
- exceptions: типизированные исключения
- RunContext: Контекст выполнения для отслеживания запусков
- Structured Logging: JSON/Human-readable логирование
"""

from .models import VHost, Exchange, Queue, Binding, Schema, DestinationType
from .context import (
    RunContext,
    get_current_context,
    set_current_context,
    RunContextFilter,
)
from .logging import (
    get_logger,
    setup_logging,
    setup_logging_from_config,
    StructuredLogger,
    LogConfig,
    RotationType,
)
from .exceptions import (
    RabbitmqToolError,
    ManagementError,
    ManagementConnectionError,
    ManagementAPIError,
    NotFoundError,
    SnapshotError,
    ConfigError,
)

__all__ = [
    "VHost",
    "Exchange",
    "Queue",
    "Binding",
    "Schema",
    "DestinationType",
    "RunContext",
    "get_current_context",
    "set_current_context",
    "RunContextFilter",
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
    "StructuredLogger",
    "LogConfig",
    "RotationType",
    "RabbitmqToolError",
    "ManagementError",
    "ManagementConnectionError",
    "ManagementAPIError",
    "NotFoundError",
    "SnapshotError",
    "ConfigError",
]
