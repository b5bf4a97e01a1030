"""
Проверка соглашения MassTransit.

MassTransit для каждого consumer создаёт exchange и очередь с одинаковым
именем и связывает их binding'ом exchange → queue. Если пара есть,
а binding'а нет, сообщения в очередь не попадут.

Проверка только читает Schema и пишет в лог, ничего не меняет.

Пример использования:
    from rabbitmq_tool.core.domain.masstransit import validate_masstransit

    missing = validate_masstransit(schema)
    # WARNING: Missing binding: 'orders' exchange -> 'orders' queue.
"""

import logging
from typing import Any, Dict, List

from ..models import Schema

logger = logging.getLogger(__name__)


def _key(name: Any) -> str:
    """Имена сравниваются без учёта регистра; null и числа из битого snapshot тоже."""
    return "" if name is None else str(name).lower()


def find_candidates(schema: Schema) -> Dict[str, str]:
    """
    Имена, для которых есть и exchange, и очередь.

    Returns:
        Dict: lower-case имя → имя как у exchange
    """
    exchanges: Dict[str, str] = {}
    for exchange in schema.exchanges:
        exchanges.setdefault(_key(exchange.name), str(exchange.name))

    queues = {_key(queue.name) for queue in schema.queues}
    return {key: name for key, name in exchanges.items() if key in queues}


def validate_masstransit(schema: Schema) -> List[str]:
    """
    Ищет пары exchange/queue одного имени без binding'а между ними.

    Args:
        schema: Snapshot vhost

    Returns:
        List[str]: Имена пар без binding (отсортированы)
    """
    candidates = find_candidates(schema)
    for name in sorted(candidates.values()):
        logger.debug(f"Found: '{name}'.")

    bound = {
        _key(binding.source)
        for binding in schema.bindings
        if _key(binding.source) == _key(binding.destination)
    }

    missing = sorted(name for key, name in candidates.items() if key not in bound)
    for name in missing:
        logger.warning(f"Missing binding: '{name}' exchange -> '{name}' queue.")

    return missing
