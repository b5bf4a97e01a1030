"""
Работа с брокером через Management API.

- client.py: HTTP клиент (ManagementClient)
- schema.py: fetch snapshot, diff двух snapshot
- restore.py: идемпотентное восстановление snapshot
"""

from .client import ManagementClient, ManagementSession
from .schema import SchemaDiff, diff_schemas, fetch, is_alive
from .restore import RestoreResult, RestoreStats, SchemaRestore, restore

__all__ = [
    "ManagementClient",
    "ManagementSession",
    "SchemaDiff",
    "diff_schemas",
    "fetch",
    "is_alive",
    "RestoreResult",
    "RestoreStats",
    "SchemaRestore",
    "restore",
]
