"""
Команда masstransit validate.

Проверка конвенции MassTransit: у exchange с именем очереди
должен быть binding exchange → одноимённая очередь.
"""

import logging

from ..utils import get_client, get_vhost
from ...core.domain.masstransit import validate_masstransit
from ...rabbitmq.schema import fetch

logger = logging.getLogger(__name__)


def cmd_masstransit_validate(args, ctx=None, cfg=None) -> None:
    """
    Снимает snapshot vhost и проверяет bindings MassTransit.

    Отсутствующие bindings только логируются (warning), код выхода 0.
    """
    client = get_client(args, cfg)
    schema = fetch(client, get_vhost(args, cfg))

    missing = validate_masstransit(schema)
    if missing:
        logger.info(f"MassTransit: не хватает bindings: {len(missing)}")
    else:
        logger.info("MassTransit: все bindings на месте")
