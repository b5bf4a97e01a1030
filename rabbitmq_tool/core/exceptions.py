"""
Типизированные исключения для RabbitMQ Tool.

Иерархия:
    RabbitmqToolError (базовый)
    ├── ManagementError (Management HTTP API)
    │   ├── ManagementConnectionError (транспорт: DNS, refused, timeout)
    │   └── ManagementAPIError (HTTP код != 2xx)
    │       └── NotFoundError (404: сущности нет на брокере)
    ├── SnapshotError (чтение/разбор snapshot файла)
    └── ConfigError (конфигурация)

NotFoundError: ожидаемая ситуация: restore по ней решает что сущность
нужно создать. Всё остальное внутри restore логируется и не прерывает обход.

Пример использования:
    from rabbitmq_tool.core.exceptions import NotFoundError, ManagementError

    try:
        client.get_queue("/", "orders")
    except NotFoundError:
        client.create_queue("/", queue)
    except ManagementError as e:
        logger.error(f"API ошибка: {format_error_for_log(e)}")
"""


from typing import Any, Optional


def _with_details(details: Optional[dict], **fields: Any) -> dict:
    """details + непустые поля (порядок полей сохраняется в str())."""
    merged = dict(details or {})
    merged.update({key: value for key, value in fields.items() if value})
    return merged


class RabbitmqToolError(Exception):
    """
    Базовое исключение для всех ошибок RabbitMQ Tool.

    Attributes:
        message: Описание ошибки
        details: Контекст ошибки (url, endpoint, path, key ...)
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} ({', '.join(f'{k}={v!r}' for k, v in self.details.items())})"

    def to_dict(self) -> dict:
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


# === Management API ===

class ManagementError(RabbitmqToolError):
    """Ошибка обращения к Management API. url: адрес API."""

    def __init__(self, message: str, url: Optional[str] = None, details: Optional[dict] = None):
        self.url = url
        super().__init__(message, _with_details(details, url=url))


class ManagementConnectionError(ManagementError):
    """
    Брокер недоступен: DNS, connection refused, timeout, TLS.

    Пример:
        raise ManagementConnectionError("Connection refused", url="http://localhost:15672")
    """


class ManagementAPIError(ManagementError):
    """
    Management API ответил не 2xx.

    Attributes:
        status_code: HTTP код ответа
        endpoint: Путь запроса (/api/queues/%2F/q1)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(
            message,
            url=url,
            details=_with_details(details, status_code=status_code, endpoint=endpoint),
        )


class NotFoundError(ManagementAPIError):
    """
    Сущности нет на брокере (HTTP 404).

    Пример:
        raise NotFoundError(endpoint="/api/exchanges/%2F/orders")
    """

    def __init__(
        self,
        message: str = "Object Not Found",
        url: Optional[str] = None,
        endpoint: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, url=url, status_code=404, endpoint=endpoint, details=details)


# === Snapshot ===

class SnapshotError(RabbitmqToolError):
    """
    Snapshot не читается: нет файла, невалидный JSON, неожиданная структура.

    path: путь к файлу или "<stdin>".
    """

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[dict] = None):
        self.path = path
        super().__init__(message, _with_details(details, path=path))


# === Config ===

class ConfigError(RabbitmqToolError):
    """
    Ошибка конфигурации.

    Пример:
        raise ConfigError("Invalid port", config_file="config.yaml", key="management.port")
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.config_file = config_file
        self.key = key
        super().__init__(message, _with_details(details, config_file=config_file, key=key))


def format_error_for_log(error: Exception) -> str:
    """Свои исключения: str() с деталями, чужие: "ClassName: message"."""
    if isinstance(error, RabbitmqToolError):
        return str(error)
    return f"{type(error).__name__}: {error}"


def is_retryable(error: Exception) -> bool:
    """
    Имеет ли смысл перезапустить команду позже.

    Restore сам ничего не повторяет: флаг нужен оператору,
    который читает сводку. Повторяемые: транспорт и 5xx.
    """
    if isinstance(error, ManagementConnectionError):
        return True
    if isinstance(error, ManagementAPIError) and error.status_code:
        return error.status_code >= 500
    return False
