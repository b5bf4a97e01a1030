"""
Pydantic схемы для валидации config.yaml.

Валидация происходит при загрузке конфигурации.
Ошибки валидации выбрасывают ConfigError.

Пример использования:
    from rabbitmq_tool.core.config_schema import validate_config

    config_dict = yaml.safe_load(open("config.yaml"))
    validated = validate_config(config_dict)  # raises ConfigError on failure
"""

from typing import Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from .exceptions import ConfigError


class ManagementConfig(BaseModel):
    """Подключение к RabbitMQ Management API."""
    host: str = "http://localhost"
    port: int = Field(default=15672, ge=1, le=65535)
    vhost: str = "/"
    username: str = "guest"
    password: str = "guest"
    verify_ssl: bool = True
    timeout: int = Field(default=30, ge=1, le=300)

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Проверяет что host содержит схему."""
        if v and not v.startswith(("http://", "https://")):
            raise PydanticCustomError(
                "invalid_url",
                "Management host должен начинаться с http:// или https://",
            )
        return v.rstrip("/")


class SnapshotConfig(BaseModel):
    """Настройки snapshot файлов."""
    indent: Optional[int] = Field(default=2, ge=0, le=8)
    encoding: str = "utf-8"


class LoggingConfig(BaseModel):
    """Настройки логирования."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    console: bool = True
    console_json: bool = False
    file_path: Optional[str] = None
    rotation: str = Field(default="size", pattern="^(size|time|none)$")
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)  # min 1KB
    backup_count: int = Field(default=5, ge=1, le=100)
    when: str = "midnight"
    interval: int = Field(default=1, ge=1)


class AppConfig(BaseModel):
    """Полная конфигурация приложения."""
    management: ManagementConfig = Field(default_factory=ManagementConfig)
    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    debug: bool = False


def validate_config(config_dict: dict, config_file: str = "config.yaml") -> AppConfig:
    """
    Проверяет словарь конфигурации (defaults + YAML + env).

    В ConfigError попадает первая ошибка pydantic: ключ в точечной
    нотации ("management.port") и её текст.

    Raises:
        ConfigError: При ошибке валидации
    """
    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigError(
            message=f"Ошибка валидации конфигурации: {key or 'config'}: {first['msg']}",
            config_file=config_file,
            key=key,
        ) from e


def get_default_config() -> AppConfig:
    """Возвращает конфигурацию по умолчанию."""
    return AppConfig()
