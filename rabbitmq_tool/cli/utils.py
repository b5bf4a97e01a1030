"""
Утилиты CLI.

Общие функции для всех команд CLI.
"""

import sys
import logging
from typing import Optional

from ..core.exceptions import SnapshotError
from ..core.models import Schema
from ..exporters.snapshot import SnapshotExporter
from ..rabbitmq.client import ManagementClient

logger = logging.getLogger(__name__)

RESTORE_USAGE = (
    "Snapshot не передан.\n"
    "Использование:\n"
    "  rabbitmq-tool schema restore -i schema.json\n"
    "  cat schema.json | rabbitmq-tool schema restore"
)


def resolve_connection(args, cfg) -> dict:
    """
    Собирает параметры подключения.

    Приоритет: аргумент CLI > переменная окружения > config.yaml > default.
    Окружение и YAML уже слиты в cfg.management.

    Args:
        args: Аргументы командной строки
        cfg: Config

    Returns:
        dict: host, port, vhost, username, password, verify_ssl, timeout
    """
    management = cfg.management
    params = {
        "host": management.get("host", "http://localhost"),
        "port": management.get("port", 15672),
        "vhost": management.get("vhost", "/"),
        "username": management.get("username", "guest"),
        "password": management.get("password", "guest"),
        "verify_ssl": management.get("verify_ssl", True),
        "timeout": management.get("timeout", 30),
    }
    for key in ("host", "port", "vhost", "username", "password"):
        value = getattr(args, key, None)
        if value:
            params[key] = value
    return params


def get_client(args, cfg) -> ManagementClient:
    """
    Создаёт клиент Management API по аргументам и конфигурации.

    Returns:
        ManagementClient: Клиент
    """
    params = resolve_connection(args, cfg)
    logger.debug(f"Подключение: {params['host']}:{params['port']}, vhost={params['vhost']!r}")
    return ManagementClient(
        host=params["host"],
        port=params["port"],
        username=params["username"],
        password=params["password"],
        verify_ssl=params["verify_ssl"],
        timeout=params["timeout"],
    )


def get_vhost(args, cfg) -> str:
    """vhost из аргументов или конфигурации."""
    return resolve_connection(args, cfg)["vhost"]


def get_exporter(cfg) -> SnapshotExporter:
    """Экспортер snapshot с настройками из config.yaml."""
    snapshot = cfg.snapshot
    return SnapshotExporter(
        indent=snapshot.get("indent", 2),
        encoding=snapshot.get("encoding", "utf-8"),
    )


def read_snapshot(path: Optional[str], cfg, stdin=None) -> Optional[Schema]:
    """
    Читает snapshot из файла или из stdin (если он перенаправлен).

    Args:
        path: Путь к файлу (-i)
        cfg: Config
        stdin: Поток ввода (по умолчанию sys.stdin)

    Returns:
        Schema или None если источника нет (stdin это терминал)

    Raises:
        SnapshotError: Файл не найден или невалиден
    """
    exporter = get_exporter(cfg)
    if path:
        return exporter.load(path)

    stream = stdin if stdin is not None else sys.stdin
    if stream is None or stream.isatty():
        return None
    return exporter.load(stream)


def load_snapshot_or_exit(path: str, cfg) -> Schema:
    """Читает snapshot файл, при ошибке логирует и завершает с кодом 1."""
    try:
        return get_exporter(cfg).load(path)
    except SnapshotError as e:
        logger.error(f"Ошибка snapshot: {e}")
        sys.exit(1)
