"""
Data Models для RabbitMQ Tool.

Типизированные dataclasses топологии брокера:
- VHost, Exchange, Queue, Binding: одна сущность Management API
- Schema: snapshot одного vhost (vhosts, exchanges, queues, bindings)

Имена полей совпадают с JSON Management API (auto_delete, routing_key, ...),
поэтому from_dict() принимает ответ API как есть. Для старых snapshot файлов
поддерживаются PascalCase ключи (AutoDelete, RoutingKey, ...).

Использование:
    from rabbitmq_tool.core.models import Queue, Schema

    queue = Queue.from_dict({"name": "orders", "vhost": "/", "durable": True})
    print(queue.title)  # '/orders'

    data = schema.to_dict()
    schema = Schema.from_dict(data)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class DestinationType(str, Enum):
    """Тип получателя binding."""
    QUEUE = "queue"
    EXCHANGE = "exchange"


def format_title(vhost: Optional[str], element: Optional[str]) -> str:
    """
    Человекочитаемый заголовок сущности: '<vhost>/<name>'.

    Слэши по краям vhost убираются, поэтому для vhost "/"
    и очереди "q1" получится '/q1'.
    """
    return f"'{(vhost or '').strip('/')}/{element or ''}'"


def _pick(data: Dict[str, Any], key: str, legacy_key: str, default: Any = None) -> Any:
    """Значение по ключу API или по PascalCase ключу старого snapshot."""
    if key in data:
        return data[key]
    return data.get(legacy_key, default)


def _text(value: Any) -> str:
    """Имена и ключи всегда строки: null даёт "", число даёт его запись."""
    return "" if value is None else str(value)


def _arguments(value: Any) -> Dict[str, Any]:
    """Arguments из API приходят dict'ом, в старых snapshot может быть null."""
    if isinstance(value, dict):
        return dict(value)
    return {}


@dataclass
class VHost:
    """
    Виртуальный хост брокера.

    Attributes:
        name: Имя vhost ("/": default vhost)
    """
    name: str

    @property
    def title(self) -> str:
        return f"'{self.name}'"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VHost":
        """Создаёт VHost из словаря."""
        return cls(name=_text(_pick(data, "name", "Name")))

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь."""
        return {"name": self.name}


@dataclass
class Exchange:
    """
    Exchange (точка маршрутизации).

    Attributes:
        vhost: Имя vhost
        name: Имя exchange
        type: Тип (direct, fanout, topic, headers или плагинный)
        durable: Переживает рестарт брокера
        auto_delete: Удаляется после отвязки последнего binding
        internal: Не принимает публикации от клиентов
        arguments: Дополнительные аргументы (alternate-exchange, ...)
    """
    vhost: str
    name: str
    type: str = "direct"
    durable: bool = True
    auto_delete: bool = False
    internal: bool = False
    arguments: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return format_title(self.vhost, self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Exchange":
        """Создаёт Exchange из словаря (ответ API или snapshot)."""
        return cls(
            vhost=_text(_pick(data, "vhost", "Vhost")),
            name=_text(_pick(data, "name", "Name")),
            type=_text(_pick(data, "type", "Type")),
            durable=bool(_pick(data, "durable", "Durable", False)),
            auto_delete=bool(_pick(data, "auto_delete", "AutoDelete", False)),
            internal=bool(_pick(data, "internal", "Internal", False)),
            arguments=_arguments(_pick(data, "arguments", "Arguments")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь со стабильным порядком полей."""
        return {
            "name": self.name,
            "vhost": self.vhost,
            "type": self.type,
            "durable": self.durable,
            "auto_delete": self.auto_delete,
            "internal": self.internal,
            "arguments": dict(self.arguments),
        }


@dataclass
class Queue:
    """
    Очередь.

    Attributes:
        vhost: Имя vhost
        name: Имя очереди
        durable: Переживает рестарт брокера
        auto_delete: Удаляется после отключения последнего consumer
        arguments: x-arguments (x-message-ttl, x-dead-letter-exchange, ...)
    """
    vhost: str
    name: str
    durable: bool = True
    auto_delete: bool = False
    arguments: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return format_title(self.vhost, self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Queue":
        """Создаёт Queue из словаря. Статистика очереди игнорируется."""
        return cls(
            vhost=_text(_pick(data, "vhost", "Vhost")),
            name=_text(_pick(data, "name", "Name")),
            durable=bool(_pick(data, "durable", "Durable", False)),
            auto_delete=bool(_pick(data, "auto_delete", "AutoDelete", False)),
            arguments=_arguments(_pick(data, "arguments", "Arguments")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь со стабильным порядком полей."""
        return {
            "name": self.name,
            "vhost": self.vhost,
            "durable": self.durable,
            "auto_delete": self.auto_delete,
            "arguments": dict(self.arguments),
        }


@dataclass
class Binding:
    """
    Binding: правило маршрутизации exchange → queue/exchange.

    Attributes:
        vhost: Имя vhost
        source: Имя exchange-источника
        destination: Имя очереди или exchange-получателя
        destination_type: "queue" или "exchange"
        routing_key: Ключ маршрутизации
        properties_key: Ключ binding в API (routing_key + хэш аргументов)
        arguments: Аргументы binding (для headers exchange)
    """
    vhost: str
    source: str
    destination: str
    destination_type: str = DestinationType.QUEUE.value
    routing_key: str = ""
    properties_key: str = ""
    arguments: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return (
            f"{format_title(self.vhost, self.source)} exchange -> "
            f"{format_title(self.vhost, self.destination)} {self.destination_type}"
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Binding":
        """Создаёт Binding из словаря (ответ API или snapshot)."""
        return cls(
            vhost=_text(_pick(data, "vhost", "Vhost")),
            source=_text(_pick(data, "source", "Source")),
            destination=_text(_pick(data, "destination", "Destination")),
            destination_type=_text(_pick(data, "destination_type", "DestinationType")),
            routing_key=_text(_pick(data, "routing_key", "RoutingKey")),
            properties_key=_text(_pick(data, "properties_key", "PropertiesKey")),
            arguments=_arguments(_pick(data, "arguments", "Arguments")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь со стабильным порядком полей."""
        return {
            "source": self.source,
            "vhost": self.vhost,
            "destination": self.destination,
            "destination_type": self.destination_type,
            "routing_key": self.routing_key,
            "properties_key": self.properties_key,
            "arguments": dict(self.arguments),
        }


@dataclass
class Schema:
    """
    Snapshot топологии одного vhost.

    Порядок элементов сохраняется: fetch сортирует их,
    load_snapshot() оставляет порядок файла.

    Attributes:
        vhosts: Виртуальные хосты (обычно один)
        exchanges: Exchanges vhost без auto-delete
        queues: Очереди vhost без auto-delete
        bindings: Bindings между оставленными exchanges/queues
    """
    vhosts: List[VHost] = field(default_factory=list)
    exchanges: List[Exchange] = field(default_factory=list)
    queues: List[Queue] = field(default_factory=list)
    bindings: List[Binding] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schema":
        """Создаёт Schema из словаря snapshot (новый или PascalCase формат)."""
        return cls(
            vhosts=[VHost.from_dict(v) for v in _pick(data, "vhosts", "VHosts") or []],
            exchanges=[Exchange.from_dict(e) for e in _pick(data, "exchanges", "Exchanges") or []],
            queues=[Queue.from_dict(q) for q in _pick(data, "queues", "Queues") or []],
            bindings=[Binding.from_dict(b) for b in _pick(data, "bindings", "Bindings") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Конвертирует в словарь snapshot."""
        return {
            "vhosts": [v.to_dict() for v in self.vhosts],
            "exchanges": [e.to_dict() for e in self.exchanges],
            "queues": [q.to_dict() for q in self.queues],
            "bindings": [b.to_dict() for b in self.bindings],
        }

    def summary(self) -> str:
        """Краткая сводка: количество сущностей по типам."""
        return (
            f"vhosts={len(self.vhosts)}, exchanges={len(self.exchanges)}, "
            f"queues={len(self.queues)}, bindings={len(self.bindings)}"
        )
