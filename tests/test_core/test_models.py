"""
Tests for topology models.

Проверяет заголовки сущностей, сериализацию и чтение старого PascalCase формата.
"""

import pytest

from rabbitmq_tool.core.models import (
    Binding,
    Exchange,
    Queue,
    Schema,
    VHost,
    format_title,
)


@pytest.mark.unit
class TestTitles:
    """Тесты заголовков."""

    @pytest.mark.parametrize("vhost, name, expected", [
        ("/", "q1", "'/q1'"),
        ("orders", "q1", "'orders/q1'"),
        ("/orders/", "q1", "'orders/q1'"),
        ("", "q1", "'/q1'"),
        (None, None, "'/'"),
    ])
    def test_format_title(self, vhost, name, expected):
        """Слэши по краям vhost убираются."""
        assert format_title(vhost, name) == expected

    def test_vhost_title(self):
        """Заголовок vhost: имя в кавычках."""
        assert VHost("/").title == "'/'"

    def test_exchange_and_queue_title(self):
        """Заголовок exchange/queue."""
        assert Exchange("/", "orders").title == "'/orders'"
        assert Queue("billing", "invoices").title == "'billing/invoices'"

    def test_binding_title(self):
        """Заголовок binding: источник, получатель и его тип."""
        binding = Binding("/", "src", "dst", "queue")
        assert binding.title == "'/src' exchange -> '/dst' queue"

        binding = Binding("/", "src", "dst", "exchange")
        assert binding.title == "'/src' exchange -> '/dst' exchange"


@pytest.mark.unit
class TestFromDict:
    """Тесты создания из словаря."""

    def test_exchange_from_api(self):
        """Ответ API: лишние поля игнорируются."""
        data = {
            "name": "orders",
            "vhost": "/",
            "type": "fanout",
            "durable": True,
            "auto_delete": False,
            "internal": False,
            "arguments": {"alternate-exchange": "ae"},
            "message_stats": {"publish_in": 10},
        }
        exchange = Exchange.from_dict(data)

        assert exchange == Exchange(
            "/", "orders", type="fanout", arguments={"alternate-exchange": "ae"},
        )

    def test_queue_ignores_statistics(self):
        """Статистика очереди не попадает в модель."""
        queue = Queue.from_dict({
            "name": "orders", "vhost": "/", "durable": True, "auto_delete": False,
            "arguments": {}, "messages": 42, "consumers": 3,
        })
        assert queue.to_dict() == {
            "name": "orders",
            "vhost": "/",
            "durable": True,
            "auto_delete": False,
            "arguments": {},
        }

    def test_legacy_pascal_case(self):
        """Старый формат snapshot (PascalCase)."""
        binding = Binding.from_dict({
            "Source": "orders",
            "Vhost": "/",
            "Destination": "orders",
            "DestinationType": "queue",
            "RoutingKey": "",
            "PropertiesKey": "~",
            "Arguments": None,
        })

        assert binding == Binding("/", "orders", "orders", "queue", properties_key="~")

    def test_missing_fields(self):
        """Отсутствующие поля получают пустые значения."""
        queue = Queue.from_dict({"name": "q"})
        assert queue.vhost == ""
        assert queue.durable is False
        assert queue.arguments == {}

    def test_identity_fields_coerced_to_str(self):
        """Числовые имена и ключи становятся строками, null: пустой строкой."""
        binding = Binding.from_dict({"source": 5, "destination": None, "vhost": "/", "routing_key": 42})

        assert binding.source == "5"
        assert binding.destination == ""
        assert binding.routing_key == "42"
        assert Queue.from_dict({"name": 7, "vhost": "/"}).title == "'/7'"
        assert VHost.from_dict({"Name": 1}).name == "1"


@pytest.mark.unit
class TestSchema:
    """Тесты Schema."""

    def test_to_dict_field_order(self, sample_schema):
        """Порядок полей стабилен."""
        data = sample_schema.to_dict()

        assert list(data) == ["vhosts", "exchanges", "queues", "bindings"]
        assert list(data["exchanges"][0]) == [
            "name", "vhost", "type", "durable", "auto_delete", "internal", "arguments",
        ]
        assert list(data["bindings"][0]) == [
            "source", "vhost", "destination", "destination_type",
            "routing_key", "properties_key", "arguments",
        ]

    def test_from_dict_restores_schema(self, sample_schema):
        """to_dict → from_dict возвращает равный Schema."""
        assert Schema.from_dict(sample_schema.to_dict()) == sample_schema

    def test_from_dict_legacy_sections(self):
        """Разделы VHosts/Exchanges/Queues/Bindings."""
        schema = Schema.from_dict({
            "VHosts": [{"Name": "/"}],
            "Exchanges": [{"Name": "orders", "Vhost": "/", "Type": "fanout", "Durable": True}],
            "Queues": [{"Name": "orders", "Vhost": "/", "Durable": True}],
            "Bindings": [],
        })

        assert schema.vhosts == [VHost("/")]
        assert schema.exchanges[0].type == "fanout"
        assert schema.queues[0].durable is True

    def test_summary(self, sample_schema):
        """Сводка по количеству."""
        assert sample_schema.summary() == "vhosts=1, exchanges=2, queues=2, bindings=2"
