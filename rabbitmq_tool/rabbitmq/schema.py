"""
Snapshot топологии и сравнение двух snapshot.

fetch() снимает топологию одного vhost с брокера:
- только сущности указанного vhost (имя vhost без учёта регистра)
- exchanges и очереди с auto_delete отбрасываются
- bindings только между оставшимися exchanges/очередями
- exchanges/очереди отсортированы по (vhost, name),
  bindings по (vhost, source, destination)

diff_schemas() сравнивает два snapshot по exchanges, очередям и bindings.
VHosts не сравниваются.

Пример использования:
    from rabbitmq_tool.rabbitmq.schema import fetch, diff_schemas

    left = fetch(client_a, "/")
    right = fetch(client_b, "/")
    result = diff_schemas(left, right)
    print(result.format_detailed())
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from ..core.domain.diff import DiffList, DiffType, diff
from ..core.domain.equality import (
    binding_equal,
    equals_ignore_case,
    exchange_equal,
    queue_equal,
)
from ..core.models import Binding, DestinationType, Exchange, Queue, Schema

logger = logging.getLogger(__name__)


def is_alive(client, vhost: str) -> bool:
    """Проверяет доступность vhost через aliveness-test."""
    return client.is_alive(vhost)


def fetch(client, vhost: str) -> Schema:
    """
    Снимает snapshot топологии vhost.

    Args:
        client: ManagementClient
        vhost: Имя vhost

    Returns:
        Schema: Snapshot
    """
    schema = Schema()

    schema.vhosts.extend(
        v for v in client.list_vhosts() if equals_ignore_case(v.name, vhost)
    )

    schema.exchanges.extend(sorted(
        (
            e for e in client.list_exchanges()
            if not e.auto_delete and equals_ignore_case(e.vhost, vhost)
        ),
        key=lambda e: (e.vhost, e.name),
    ))

    schema.queues.extend(sorted(
        (
            q for q in client.list_queues()
            if not q.auto_delete and equals_ignore_case(q.vhost, vhost)
        ),
        key=lambda q: (q.vhost, q.name),
    ))

    exchanges = {e.name for e in schema.exchanges}
    queues = {q.name for q in schema.queues}

    def _has_endpoints(binding: Binding) -> bool:
        if binding.source not in exchanges:
            return False
        if equals_ignore_case(binding.destination_type, DestinationType.QUEUE.value):
            return binding.destination in queues
        if equals_ignore_case(binding.destination_type, DestinationType.EXCHANGE.value):
            return binding.destination in exchanges
        return False

    schema.bindings.extend(sorted(
        (
            b for b in client.list_bindings()
            if equals_ignore_case(b.vhost, vhost) and _has_endpoints(b)
        ),
        key=lambda b: (b.vhost, b.source, b.destination),
    ))

    logger.info(f"Snapshot '{vhost}': {schema.summary()}")
    return schema


def entity_key(entity: Any) -> str:
    """Ключ сопоставления сущностей: заголовок без учёта регистра."""
    return entity.title.lower()


@dataclass
class SchemaDiff:
    """
    Результат сравнения двух snapshot.

    Attributes:
        exchanges: Расхождения exchanges
        queues: Расхождения очередей
        bindings: Расхождения bindings
    """
    exchanges: DiffList[Exchange] = field(default_factory=DiffList)
    queues: DiffList[Queue] = field(default_factory=DiffList)
    bindings: DiffList[Binding] = field(default_factory=DiffList)

    def categories(self) -> Dict[str, DiffList]:
        return {
            "Exchanges": self.exchanges,
            "Queues": self.queues,
            "Bindings": self.bindings,
        }

    @property
    def total_changes(self) -> int:
        """Общее количество расхождений."""
        return len(self.exchanges) + len(self.queues) + len(self.bindings)

    @property
    def has_changes(self) -> bool:
        return self.total_changes > 0

    def count(self, diff_type: DiffType) -> int:
        return sum(len(diffs.of_type(diff_type)) for diffs in self.categories().values())

    def summary(self) -> str:
        """Краткая сводка по категориям."""
        return "; ".join(
            f"{name}: {diffs.summary()}" for name, diffs in self.categories().items()
        )

    def format_detailed(self) -> str:
        """
        Детальный вывод: количество по категории и строка на каждое расхождение.

        Returns:
            str: Форматированный вывод (заканчивается строкой "Done.")
        """
        lines = []
        for name, diffs in self.categories().items():
            lines.append(f"{name}: {diffs.count}")
            for item in diffs:
                lines.append(f"  {item}")
        lines.append("Done.")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь."""
        return {
            "summary": {
                "added": self.count(DiffType.ADDED),
                "removed": self.count(DiffType.REMOVED),
                "changed": self.count(DiffType.CHANGED),
            },
            "exchanges": self.exchanges.to_list(),
            "queues": self.queues.to_list(),
            "bindings": self.bindings.to_list(),
        }


def diff_schemas(left: Schema, right: Schema) -> SchemaDiff:
    """
    Сравнивает два snapshot.

    Args:
        left: Исходный snapshot
        right: Целевой snapshot

    Returns:
        SchemaDiff: что нужно изменить в left чтобы получить right
    """
    return SchemaDiff(
        exchanges=diff(left.exchanges, right.exchanges, entity_key, exchange_equal),
        queues=diff(left.queues, right.queues, entity_key, queue_equal),
        bindings=diff(left.bindings, right.bindings, entity_key, binding_equal),
    )
