"""
Экспорт snapshot топологии.

Пример использования:
    from rabbitmq_tool.exporters import SnapshotExporter

    exporter = SnapshotExporter(indent=2)
    exporter.dump(schema, "schema.json")
"""

from .snapshot import SnapshotExporter, dump_snapshot, load_snapshot, snapshot_to_json

__all__ = ["SnapshotExporter", "dump_snapshot", "load_snapshot", "snapshot_to_json"]
