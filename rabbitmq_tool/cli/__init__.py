"""
CLI модуль rabbitmq_tool.

Структура:
- utils.py: общие утилиты (get_client, get_exporter, read_snapshot)
- commands/: обработчики команд
  - schema.py: schema is-alive, fetch, restore, diff
  - masstransit.py: masstransit validate

Примеры использования:
    python -m rabbitmq_tool schema is-alive --host http://rabbit.local
    python -m rabbitmq_tool schema fetch --vhost / -o schema.json
    python -m rabbitmq_tool schema restore -i schema.json --dry-run
    python -m rabbitmq_tool schema diff --left a.json --right b.json
    python -m rabbitmq_tool masstransit validate --vhost orders
"""

import sys
import argparse
import logging
from typing import List, Optional

from .utils import get_client, get_exporter, read_snapshot, resolve_connection

from .commands import (
    cmd_is_alive,
    cmd_fetch,
    cmd_restore,
    cmd_diff,
    cmd_masstransit_validate,
)

logger = logging.getLogger(__name__)


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    """Аргументы подключения к Management API (перекрывают env и config.yaml)."""
    parser.add_argument(
        "--host",
        default=None,
        help="Адрес Management API со схемой (env: RABBITMQTOOL_HOST, default: http://localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Порт Management API (env: RABBITMQTOOL_PORT, default: 15672)",
    )
    parser.add_argument(
        "--vhost",
        default=None,
        help="Виртуальный хост (env: RABBITMQTOOL_VHOST, default: /)",
    )
    parser.add_argument(
        "-u",
        "--username",
        default=None,
        help="Пользователь (env: RABBITMQTOOL_USERNAME, default: guest)",
    )
    parser.add_argument(
        "-p",
        "--password",
        default=None,
        help="Пароль (env: RABBITMQTOOL_PASSWORD, default: guest)",
    )


def setup_parser() -> argparse.ArgumentParser:
    """
    Создаёт парсер аргументов командной строки.

    Returns:
        ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog="rabbitmq-tool",
        description="Snapshot, restore и сравнение топологии RabbitMQ через Management API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  %(prog)s schema fetch --vhost / -o schema.json
  %(prog)s schema restore -i schema.json --host http://rabbit-b
  cat schema.json | %(prog)s schema restore --dry-run
  %(prog)s schema diff --left a.json --right b.json --format json
  %(prog)s masstransit validate --vhost orders
        """,
    )

    # Общие аргументы
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Подробный вывод (DEBUG)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Путь к файлу конфигурации YAML (default: config.yaml)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Логи в формате JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Команды")

    # === SCHEMA ===
    schema_parser = subparsers.add_parser("schema", help="Работа с топологией vhost")
    schema_subparsers = schema_parser.add_subparsers(
        dest="schema_command",
        help="Подкоманды schema",
    )

    # schema is-alive
    alive_parser = schema_subparsers.add_parser("is-alive", help="Проверка доступности vhost")
    _add_connection_args(alive_parser)

    # schema fetch
    fetch_parser = schema_subparsers.add_parser("fetch", help="Snapshot топологии vhost")
    _add_connection_args(fetch_parser)
    fetch_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Файл для snapshot (default: stdout)",
    )

    # schema restore
    restore_parser = schema_subparsers.add_parser(
        "restore",
        help="Восстановление snapshot (создаёт недостающее, ничего не удаляет)",
    )
    _add_connection_args(restore_parser)
    restore_parser.add_argument(
        "-i",
        "--input",
        default=None,
        help="Файл snapshot (default: stdin)",
    )
    restore_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Только показать что будет создано",
    )

    # schema diff
    diff_parser = schema_subparsers.add_parser("diff", help="Сравнение двух snapshot")
    diff_parser.add_argument("--left", required=True, help="Исходный snapshot")
    diff_parser.add_argument("--right", required=True, help="Целевой snapshot")
    diff_parser.add_argument(
        "--format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Формат вывода",
    )

    # === MASSTRANSIT ===
    mt_parser = subparsers.add_parser("masstransit", help="Проверки конвенций MassTransit")
    mt_subparsers = mt_parser.add_subparsers(
        dest="masstransit_command",
        help="Подкоманды masstransit",
    )
    mt_validate = mt_subparsers.add_parser(
        "validate",
        help="Проверить bindings exchange → одноимённая очередь",
    )
    _add_connection_args(mt_validate)

    return parser


SCHEMA_COMMANDS = {
    "is-alive": cmd_is_alive,
    "fetch": cmd_fetch,
    "restore": cmd_restore,
    "diff": cmd_diff,
}

MASSTRANSIT_COMMANDS = {
    "validate": cmd_masstransit_validate,
}


def _build_log_config(args, log_cfg):
    """LogConfig из config.yaml с учётом -v и --json-logs."""
    from ..core.logging import LogConfig

    log_config = LogConfig.from_dict(log_cfg.to_dict() if log_cfg else {})

    # Приоритет: -v флаг > config.yaml > INFO по умолчанию
    if args.verbose:
        log_config.level = logging.DEBUG
    if args.json_logs:
        log_config.json_format = True
        log_config.console_json = True
    return log_config


def main(argv: Optional[List[str]] = None) -> None:
    """Главная функция CLI."""
    from ..config import load_config
    from ..core.context import RunContext, set_current_context
    from ..core.exceptions import ConfigError, RabbitmqToolError, format_error_for_log
    from ..core.logging import setup_logging, setup_logging_from_config

    parser = setup_parser()
    args = parser.parse_args(argv)

    # Загружаем конфигурацию из YAML (если есть)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        setup_logging(json_format=args.json_logs)
        logger.error(f"Ошибка конфигурации: {e}")
        sys.exit(1)

    # Создаём контекст выполнения
    dry_run = getattr(args, "dry_run", False)
    subcommand = getattr(args, "schema_command", None) or getattr(args, "masstransit_command", None)
    ctx = RunContext.create(
        dry_run=dry_run,
        triggered_by="cli",
        command=" ".join(filter(None, [args.command, subcommand])),
    )
    set_current_context(ctx)

    setup_logging_from_config(_build_log_config(args, cfg.logging))

    # Выбор команды
    if args.command == "schema":
        handler = SCHEMA_COMMANDS.get(args.schema_command)
    elif args.command == "masstransit":
        handler = MASSTRANSIT_COMMANDS.get(args.masstransit_command)
    else:
        handler = None

    if handler is None:
        parser.print_help()
        return

    logger.info(f"Run started (command={ctx.command}, dry_run={dry_run})")

    try:
        handler(args, ctx, cfg)
    except RabbitmqToolError as e:
        logger.error(f"Команда не выполнена: {format_error_for_log(e)}")
        sys.exit(1)
    except Exception:
        logger.critical("The program could not handle the command", exc_info=True)
        sys.exit(1)

    # Логируем завершение
    logger.info(f"Run completed: {ctx.run_id} (elapsed={ctx.elapsed_human})")


__all__ = [
    # Utils
    "get_client",
    "get_exporter",
    "read_snapshot",
    "resolve_connection",
    # Commands
    "cmd_is_alive",
    "cmd_fetch",
    "cmd_restore",
    "cmd_diff",
    "cmd_masstransit_validate",
    # Entry points
    "setup_parser",
    "main",
]
