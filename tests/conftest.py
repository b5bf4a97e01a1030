"""
Pytest configuration и общие fixtures для тестов.

Предоставляет переиспользуемые fixtures:
- fake_broker: брокер в памяти с интерфейсом ManagementClient
- broker_factory: создание нескольких независимых брокеров
- sample_schema: типичный snapshot vhost "/"
- reset_context: сброс глобального RunContext между тестами
"""

import pytest
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

from rabbitmq_tool.core.context import set_current_context
from rabbitmq_tool.core.exceptions import NotFoundError
from rabbitmq_tool.core.models import Binding, Exchange, Queue, Schema, VHost


class FakeBroker:
    """
    Брокер в памяти.

    Повторяет поведение Management API, которое важно для restore/fetch:
    - get_* и bindings отсутствующего получателя бросают NotFoundError
    - properties_key binding'а: routing_key или "~" для пустого ключа
    - list_* возвращают сущности всех vhost
    """

    def __init__(self):
        self.vhosts: Dict[str, VHost] = {}
        self.exchanges: Dict[Tuple[str, str], Exchange] = {}
        self.queues: Dict[Tuple[str, str], Queue] = {}
        self.bindings: List[Binding] = []
        self.calls: List[str] = []
        self.alive = True

    # ==================== ЗАПОЛНЕНИЕ ====================

    def add_vhost(self, name: str) -> "FakeBroker":
        self.vhosts[name] = VHost(name)
        return self

    def add_exchange(self, exchange: Exchange) -> "FakeBroker":
        self.exchanges[(exchange.vhost, exchange.name)] = exchange
        return self

    def add_queue(self, queue: Queue) -> "FakeBroker":
        self.queues[(queue.vhost, queue.name)] = queue
        return self

    def add_binding(self, binding: Binding) -> "FakeBroker":
        binding.properties_key = binding.routing_key or "~"
        self.bindings.append(binding)
        return self

    # ==================== API ====================

    def get_overview(self) -> dict:
        self.calls.append("get_overview")
        return {"rabbitmq_version": "3.12.0", "cluster_name": "fake@localhost"}

    def is_alive(self, vhost: str) -> bool:
        self.calls.append(f"is_alive:{vhost}")
        return self.alive and vhost in self.vhosts

    def list_vhosts(self) -> List[VHost]:
        return list(self.vhosts.values())

    def get_vhost(self, name: str) -> VHost:
        self.calls.append(f"get_vhost:{name}")
        if name not in self.vhosts:
            raise NotFoundError(endpoint=f"/api/vhosts/{name}")
        return self.vhosts[name]

    def create_vhost(self, name: str) -> None:
        self.calls.append(f"create_vhost:{name}")
        self.add_vhost(name)

    def list_exchanges(self, vhost: Optional[str] = None) -> List[Exchange]:
        return [e for e in self.exchanges.values() if vhost is None or e.vhost == vhost]

    def get_exchange(self, vhost: str, name: str) -> Exchange:
        self.calls.append(f"get_exchange:{name}")
        if (vhost, name) not in self.exchanges:
            raise NotFoundError(endpoint=f"/api/exchanges/{vhost}/{name}")
        return self.exchanges[(vhost, name)]

    def create_exchange(self, vhost: str, exchange: Exchange) -> None:
        self.calls.append(f"create_exchange:{exchange.name}")
        self.add_exchange(Exchange.from_dict(dict(exchange.to_dict(), vhost=vhost)))

    def list_queues(self, vhost: Optional[str] = None) -> List[Queue]:
        return [q for q in self.queues.values() if vhost is None or q.vhost == vhost]

    def get_queue(self, vhost: str, name: str) -> Queue:
        self.calls.append(f"get_queue:{name}")
        if (vhost, name) not in self.queues:
            raise NotFoundError(endpoint=f"/api/queues/{vhost}/{name}")
        return self.queues[(vhost, name)]

    def create_queue(self, vhost: str, queue: Queue) -> None:
        self.calls.append(f"create_queue:{queue.name}")
        self.add_queue(Queue.from_dict(dict(queue.to_dict(), vhost=vhost)))

    def list_bindings(self, vhost: Optional[str] = None) -> List[Binding]:
        return [b for b in self.bindings if vhost is None or b.vhost == vhost]

    def get_bindings_for_queue(self, vhost: str, queue: str) -> List[Binding]:
        self.calls.append(f"get_bindings_for_queue:{queue}")
        if (vhost, queue) not in self.queues:
            raise NotFoundError(endpoint=f"/api/queues/{vhost}/{queue}/bindings")
        return [
            b for b in self.bindings
            if b.vhost == vhost and b.destination == queue and b.destination_type == "queue"
        ]

    def get_bindings_with_destination_exchange(self, vhost: str, exchange: str) -> List[Binding]:
        self.calls.append(f"get_bindings_with_destination_exchange:{exchange}")
        if (vhost, exchange) not in self.exchanges:
            raise NotFoundError(endpoint=f"/api/exchanges/{vhost}/{exchange}/bindings/destination")
        return [
            b for b in self.bindings
            if b.vhost == vhost and b.destination == exchange and b.destination_type == "exchange"
        ]

    def create_binding(
        self,
        vhost: str,
        source: str,
        destination: str,
        destination_type: str,
        routing_key: str = "",
        arguments: Optional[dict] = None,
    ) -> None:
        self.calls.append(f"create_binding:{source}->{destination}")
        self.add_binding(Binding(
            vhost=vhost,
            source=source,
            destination=destination,
            destination_type=destination_type,
            routing_key=routing_key,
            arguments=dict(arguments or {}),
        ))

    def created(self) -> List[str]:
        """Вызовы create_* в порядке выполнения."""
        return [call for call in self.calls if call.startswith("create_")]


def build_sample_broker() -> FakeBroker:
    """
    Брокер с двумя vhost.

    vhost "/": orders (exchange+queue+binding), billing (exchange+queue без binding),
    events → orders (exchange → exchange), auto-delete мусор, binding на amq.direct.
    vhost "staging": своя очередь, в snapshot "/" не попадает.
    """
    broker = FakeBroker()
    broker.add_vhost("/").add_vhost("staging")

    broker.add_exchange(Exchange("/", "orders", type="fanout"))
    broker.add_exchange(Exchange("/", "billing", type="fanout"))
    broker.add_exchange(Exchange("/", "events", type="topic"))
    broker.add_exchange(Exchange("/", "tmp.exchange", auto_delete=True))
    broker.add_exchange(Exchange("staging", "orders", type="fanout"))

    broker.add_queue(Queue("/", "orders", arguments={"x-message-ttl": 60000}))
    broker.add_queue(Queue("/", "billing"))
    broker.add_queue(Queue("/", "amq.gen-tmp", durable=False, auto_delete=True))
    broker.add_queue(Queue("staging", "orders"))

    broker.add_binding(Binding("/", "orders", "orders", "queue"))
    broker.add_binding(Binding("/", "events", "orders", "exchange", routing_key="orders.#"))
    broker.add_binding(Binding("/", "orders", "amq.gen-tmp", "queue"))
    broker.add_binding(Binding("/", "amq.direct", "billing", "queue", routing_key="billing"))
    broker.add_binding(Binding("staging", "orders", "orders", "queue"))
    return broker


@pytest.fixture
def fake_broker() -> FakeBroker:
    """Пустой брокер в памяти."""
    return FakeBroker()


@pytest.fixture
def broker_factory():
    """Фабрика брокеров: пустой по умолчанию, заполненный при sample=True."""
    def _make(sample: bool = False) -> FakeBroker:
        return build_sample_broker() if sample else FakeBroker()
    return _make


@pytest.fixture
def sample_broker() -> FakeBroker:
    """Заполненный брокер (см. build_sample_broker)."""
    return build_sample_broker()


@pytest.fixture
def sample_schema() -> Schema:
    """
    Snapshot vhost "/" в том виде, как его отдаёт fetch.

    Returns:
        Schema: 1 vhost, 2 exchanges, 2 очереди, 2 bindings
    """
    return Schema(
        vhosts=[VHost("/")],
        exchanges=[
            Exchange("/", "billing", type="fanout"),
            Exchange("/", "orders", type="fanout"),
        ],
        queues=[
            Queue("/", "billing"),
            Queue("/", "orders", arguments={"x-message-ttl": 60000}),
        ],
        bindings=[
            Binding("/", "orders", "orders", "queue", properties_key="~"),
            Binding("/", "orders", "billing", "queue", routing_key="bill", properties_key="bill"),
        ],
    )


@pytest.fixture
def mock_client():
    """
    Mock ManagementClient для тестов CLI.

    Returns:
        MagicMock: Мок с пустой топологией
    """
    client = MagicMock()
    client.is_alive.return_value = True
    client.get_overview.return_value = {"rabbitmq_version": "3.12.0"}
    client.list_vhosts.return_value = [VHost("/")]
    client.list_exchanges.return_value = []
    client.list_queues.return_value = []
    client.list_bindings.return_value = []
    return client


@pytest.fixture(autouse=True)
def reset_context():
    """Сбрасывает глобальный RunContext до и после теста."""
    set_current_context(None)
    yield
    set_current_context(None)
