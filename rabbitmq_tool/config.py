"""
Загрузчик конфигурации из config.yaml.

Предоставляет доступ к настройкам через точку:
    config.management.host
    config.management.vhost
    config.logging.level

Порядок применения (каждый следующий перекрывает предыдущий):
    1. Значения по умолчанию
    2. YAML файл (config.yaml, config.yml, .rabbitmq_tool.yaml или --config)
    3. Переменные окружения RABBITMQTOOL_*
    4. Аргументы CLI (применяются в cli/utils.py)
"""

import os
import logging
from typing import Any, Optional

import yaml

from .core.config_schema import AppConfig, validate_config
from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Путь к файлу конфигурации рядом с пакетом
CONFIG_FILE = os.path.join(os.path.dirname(__file__), "config.yaml")

# Переменные окружения → ключ секции management
ENV_PREFIX = "RABBITMQTOOL_"
ENV_KEYS = ("host", "port", "vhost", "username", "password")


class ConfigSection:
    """Секция конфигурации с доступом через точку."""

    def __init__(self, data: dict = None):
        self._data = data or {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return super().__getattribute__(name)
        value = self._data.get(name)
        if isinstance(value, dict):
            return ConfigSection(value)
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
        else:
            self._data[name] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Получить значение с дефолтом."""
        return self._data.get(key, default)

    def to_dict(self) -> dict:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"ConfigSection({self._data})"


class Config:
    """
    Главный класс конфигурации.

    Пример:
        config.management.host    # "http://localhost"
        config.management.port    # 15672
        config.snapshot.indent    # 2
    """

    def __init__(self, autoload: bool = True):
        """autoload=False: только defaults, YAML и env читает reload()."""
        self._config_file: Optional[str] = None
        self._data = self._get_defaults()
        if autoload:
            self._load_yaml()
            self._load_env()

    def _get_defaults(self) -> dict:
        """Значения по умолчанию."""
        return {
            "management": {
                "host": "http://localhost",
                "port": 15672,
                "vhost": "/",
                "username": "guest",
                "password": "guest",
                "verify_ssl": True,
                "timeout": 30,
            },
            "snapshot": {
                "indent": 2,
                "encoding": "utf-8",
            },
            "logging": {
                "level": "INFO",
                "json_format": False,
                "console": True,
                "console_json": False,
                "file_path": None,
                "rotation": "size",
                "max_bytes": 10 * 1024 * 1024,
                "backup_count": 5,
                "when": "midnight",
                "interval": 1,
            },
            "debug": False,
        }

    def _load_yaml(self, config_file: Optional[str] = None) -> None:
        """Загружает настройки из YAML файла."""
        if config_file and not os.path.exists(config_file):
            raise ConfigError("Файл конфигурации не найден", config_file=config_file)

        if not config_file:
            search_paths = [
                CONFIG_FILE,
                "config.yaml",
                "config.yml",
                ".rabbitmq_tool.yaml",
            ]
            for path in search_paths:
                if os.path.exists(path):
                    config_file = path
                    break

        if not config_file:
            return

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Ошибка чтения конфигурации: {e}", config_file=config_file) from e

        if not isinstance(yaml_data, dict):
            raise ConfigError("Корень конфигурации должен быть словарём", config_file=config_file)

        self._merge_dict(self._data, yaml_data)
        self._config_file = config_file
        logger.debug(f"Конфигурация загружена из {config_file}")

    def _load_env(self) -> None:
        """Загружает настройки подключения из переменных окружения."""
        management = self._data["management"]
        for key in ENV_KEYS:
            value = os.getenv(f"{ENV_PREFIX}{key.upper()}")
            if not value:
                continue
            if key == "port":
                try:
                    value = int(value)
                except ValueError as e:
                    raise ConfigError(
                        f"{ENV_PREFIX}PORT должен быть числом, получено {value!r}",
                        key="management.port",
                    ) from e
                # 0 в окружении означает "не задано"
                if value == 0:
                    continue
            management[key] = value

    def _merge_dict(self, base: dict, override: dict) -> None:
        """Рекурсивно мержит словари."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_dict(base[key], value)
            else:
                base[key] = value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return super().__getattribute__(name)
        value = self._data.get(name)
        if isinstance(value, dict):
            return ConfigSection(value)
        return value

    @property
    def config_file(self) -> Optional[str]:
        """Файл из которого загружена конфигурация (None = только defaults/env)."""
        return self._config_file

    def validate(self) -> AppConfig:
        """
        Валидирует текущие настройки.

        Raises:
            ConfigError: При ошибке валидации
        """
        return validate_config(self._data, config_file=self._config_file or "config.yaml")

    def reload(self, config_file: Optional[str] = None) -> None:
        """Перезагружает конфигурацию."""
        self._config_file = None
        self._data = self._get_defaults()
        self._load_yaml(config_file)
        self._load_env()


# Глобальный экземпляр: заполняется в load_config(), импорт модуля не читает файлы и env
config = Config(autoload=False)


def load_config(config_file: Optional[str] = None) -> Config:
    """
    Загружает и валидирует конфигурацию.

    Args:
        config_file: Путь к YAML файлу (опционально)

    Returns:
        Config: Объект конфигурации

    Raises:
        ConfigError: Файл не найден, не читается или не проходит валидацию
    """
    config.reload(config_file)
    config.validate()
    return config
