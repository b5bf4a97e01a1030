"""
Команды schema: is-alive, fetch, restore, diff.

Данные (snapshot JSON, отчёт diff) пишутся в stdout, логи в stderr.
"""

import sys
import json
import logging

from ..utils import (
    RESTORE_USAGE,
    get_client,
    get_exporter,
    get_vhost,
    load_snapshot_or_exit,
    read_snapshot,
)
from ...core.exceptions import SnapshotError
from ...rabbitmq.restore import SchemaRestore
from ...rabbitmq.schema import diff_schemas, fetch, is_alive

logger = logging.getLogger(__name__)


def cmd_is_alive(args, ctx=None, cfg=None) -> None:
    """Печатает True/False: проходит ли aliveness-test для vhost."""
    client = get_client(args, cfg)
    vhost = get_vhost(args, cfg)

    if args.verbose:
        overview = client.get_overview()
        logger.debug(
            f"RabbitMQ {overview.get('rabbitmq_version', '?')}, "
            f"cluster={overview.get('cluster_name', '?')}"
        )

    print(is_alive(client, vhost))


def cmd_fetch(args, ctx=None, cfg=None) -> None:
    """Снимает snapshot vhost в stdout или в файл (-o)."""
    client = get_client(args, cfg)
    vhost = get_vhost(args, cfg)

    schema = fetch(client, vhost)
    exporter = get_exporter(cfg)

    if args.output:
        exporter.dump(schema, args.output)
    else:
        exporter.dump(schema, sys.stdout)


def cmd_restore(args, ctx=None, cfg=None) -> None:
    """
    Восстанавливает snapshot на брокере.

    Snapshot читается из -i FILE или из перенаправленного stdin.
    Без источника печатается подсказка по использованию.
    """
    try:
        schema = read_snapshot(args.input, cfg)
    except SnapshotError as e:
        logger.error(f"Ошибка snapshot: {e}")
        sys.exit(1)

    if schema is None:
        print(RESTORE_USAGE)
        return

    client = get_client(args, cfg)
    dry_run = args.dry_run or bool(ctx and ctx.dry_run)

    result = SchemaRestore(client, dry_run=dry_run, context=ctx).restore(schema)
    print(result.summary())


def cmd_diff(args, ctx=None, cfg=None) -> None:
    """Сравнивает два snapshot файла."""
    left = load_snapshot_or_exit(args.left, cfg)
    right = load_snapshot_or_exit(args.right, cfg)

    result = diff_schemas(left, right)
    logger.info(f"Diff: {result.summary()}")

    if args.format == "json":
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(result.format_detailed())
