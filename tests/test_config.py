"""
Тесты загрузки конфигурации: defaults → YAML → переменные окружения.
"""

import pytest

from rabbitmq_tool.config import Config, ConfigSection, load_config
from rabbitmq_tool.core.exceptions import ConfigError

ENV_VARS = [
    "RABBITMQTOOL_HOST",
    "RABBITMQTOOL_PORT",
    "RABBITMQTOOL_VHOST",
    "RABBITMQTOOL_USERNAME",
    "RABBITMQTOOL_PASSWORD",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Без переменных RABBITMQTOOL_* и без config.yaml в рабочей директории."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("rabbitmq_tool.config.CONFIG_FILE", str(tmp_path / "missing.yaml"))
    return tmp_path


@pytest.mark.unit
class TestConfigDefaults:
    """Тесты значений по умолчанию."""

    def test_defaults(self, clean_env):
        """Без файла и окружения."""
        config = Config()

        assert config.management.host == "http://localhost"
        assert config.management.port == 15672
        assert config.management.vhost == "/"
        assert config.management.username == "guest"
        assert config.management.password == "guest"
        assert config.config_file is None

    def test_section_access(self, clean_env):
        """Секции доступны через точку и get()."""
        config = Config()

        assert isinstance(config.snapshot, ConfigSection)
        assert config.snapshot.get("indent") == 2
        assert config.snapshot.get("missing", "x") == "x"
        assert config.debug is False


@pytest.mark.unit
class TestConfigYaml:
    """Тесты YAML файла."""

    def test_yaml_overrides_defaults(self, clean_env):
        """Значения из YAML перекрывают defaults, остальное остаётся."""
        (clean_env / "config.yaml").write_text(
            "management:\n  host: https://rabbit.local\n  vhost: orders\n",
            encoding="utf-8",
        )

        config = Config()

        assert config.management.host == "https://rabbit.local"
        assert config.management.vhost == "orders"
        assert config.management.port == 15672
        assert config.config_file == "config.yaml"

    def test_explicit_file(self, clean_env):
        """--config указывает файл явно."""
        path = clean_env / "custom.yaml"
        path.write_text("snapshot:\n  indent: 4\n", encoding="utf-8")

        config = load_config(str(path))

        assert config.snapshot.indent == 4

    def test_explicit_file_missing(self, clean_env):
        """Явно указанный файл не найден."""
        with pytest.raises(ConfigError):
            load_config(str(clean_env / "nope.yaml"))

    def test_invalid_yaml(self, clean_env):
        """Битый YAML."""
        path = clean_env / "bad.yaml"
        path.write_text("management: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_root_not_mapping(self, clean_env):
        """Корень YAML: список."""
        path = clean_env / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_validation_error(self, clean_env):
        """Невалидное значение ловится pydantic схемой."""
        path = clean_env / "port.yaml"
        path.write_text("management:\n  port: 0\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            load_config(str(path))
        assert exc_info.value.key == "management.port"


@pytest.mark.unit
class TestConfigEnv:
    """Тесты переменных окружения."""

    def test_env_overrides_yaml(self, clean_env, monkeypatch):
        """Окружение перекрывает YAML."""
        (clean_env / "config.yaml").write_text(
            "management:\n  host: https://from-yaml\n", encoding="utf-8",
        )
        monkeypatch.setenv("RABBITMQTOOL_HOST", "https://from-env")
        monkeypatch.setenv("RABBITMQTOOL_PORT", "15673")
        monkeypatch.setenv("RABBITMQTOOL_USERNAME", "admin")

        config = Config()

        assert config.management.host == "https://from-env"
        assert config.management.port == 15673
        assert config.management.username == "admin"

    def test_port_zero_means_unset(self, clean_env, monkeypatch):
        """RABBITMQTOOL_PORT=0 игнорируется."""
        monkeypatch.setenv("RABBITMQTOOL_PORT", "0")
        assert Config().management.port == 15672

    def test_port_not_number(self, clean_env, monkeypatch):
        """Нечисловой порт: ConfigError."""
        monkeypatch.setenv("RABBITMQTOOL_PORT", "abc")
        with pytest.raises(ConfigError) as exc_info:
            Config()
        assert exc_info.value.key == "management.port"

    def test_empty_value_ignored(self, clean_env, monkeypatch):
        """Пустая переменная не перекрывает значение."""
        monkeypatch.setenv("RABBITMQTOOL_VHOST", "")
        assert Config().management.vhost == "/"


@pytest.mark.unit
class TestLazyGlobalConfig:
    """Глобальный config читает env и YAML только в load_config()."""

    def test_autoload_disabled(self, clean_env, monkeypatch):
        """Без autoload: только defaults, плохой env не мешает созданию."""
        monkeypatch.setenv("RABBITMQTOOL_PORT", "abc")
        (clean_env / "config.yaml").write_text("management: [broken\n", encoding="utf-8")

        cfg = Config(autoload=False)

        assert cfg.management.port == 15672
        assert cfg.config_file is None

    def test_load_config_reports_bad_env(self, clean_env, monkeypatch):
        """Ошибка env всплывает из load_config() как ConfigError."""
        monkeypatch.setenv("RABBITMQTOOL_PORT", "abc")
        with pytest.raises(ConfigError):
            load_config()
