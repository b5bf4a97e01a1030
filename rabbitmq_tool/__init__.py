"""
RabbitMQ Tool - snapshot, restore и сравнение топологии RabbitMQ.

Работает через RabbitMQ Management HTTP API:
- fetch: snapshot vhost (exchanges, очереди, bindings)
- restore: идемпотентное восстановление snapshot (ничего не удаляет)
- diff: сравнение двух snapshot
- masstransit validate: поиск пропущенных bindings exchange → очередь

Примеры использования:
    # CLI
    python -m rabbitmq_tool schema fetch -o schema.json
    python -m rabbitmq_tool schema restore -i schema.json

    # Python API
    from rabbitmq_tool import ManagementClient, fetch, restore

    client = ManagementClient(host="http://localhost", port=15672)
    schema = fetch(client, "/")
    result = restore(schema, other_client)
"""

__version__ = "1.0.0"

from .core.models import VHost, Exchange, Queue, Binding, Schema
from .rabbitmq import ManagementClient, fetch, diff_schemas, restore, SchemaRestore
from .exporters import load_snapshot, dump_snapshot, snapshot_to_json

__all__ = [
    "__version__",
    "VHost",
    "Exchange",
    "Queue",
    "Binding",
    "Schema",
    "ManagementClient",
    "fetch",
    "diff_schemas",
    "restore",
    "SchemaRestore",
    "load_snapshot",
    "dump_snapshot",
    "snapshot_to_json",
]
