"""
Тесты валидации конфигурации (pydantic).
"""

import pytest

from rabbitmq_tool.core.config_schema import (
    AppConfig,
    get_default_config,
    validate_config,
)
from rabbitmq_tool.core.exceptions import ConfigError


@pytest.mark.unit
class TestValidateConfig:
    """Тесты validate_config."""

    def test_defaults(self):
        """Конфигурация по умолчанию."""
        config = get_default_config()

        assert isinstance(config, AppConfig)
        assert config.management.host == "http://localhost"
        assert config.management.port == 15672
        assert config.management.vhost == "/"
        assert config.snapshot.indent == 2

    def test_host_trailing_slash_stripped(self):
        """Завершающий "/" у host убирается."""
        config = validate_config({"management": {"host": "https://rabbit.local/"}})
        assert config.management.host == "https://rabbit.local"

    def test_host_without_scheme(self):
        """host без схемы: ошибка с ключом."""
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"management": {"host": "rabbit.local"}}, config_file="my.yaml")

        assert exc_info.value.key == "management.host"
        assert exc_info.value.config_file == "my.yaml"

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_range(self, port):
        """Порт вне 1..65535."""
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"management": {"port": port}})
        assert exc_info.value.key == "management.port"

    def test_logging_level_pattern(self):
        """Неизвестный уровень логирования."""
        with pytest.raises(ConfigError):
            validate_config({"logging": {"level": "VERBOSE"}})

    def test_logging_rotation_pattern(self):
        """Неизвестный тип ротации."""
        with pytest.raises(ConfigError):
            validate_config({"logging": {"rotation": "weekly"}})
