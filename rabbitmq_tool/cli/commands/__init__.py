"""
CLI команды.

Каждый модуль содержит обработчики команд:
- schema.py: schema is-alive, fetch, restore, diff
- masstransit.py: masstransit validate
"""

from .schema import cmd_is_alive, cmd_fetch, cmd_restore, cmd_diff
from .masstransit import cmd_masstransit_validate

__all__ = [
    "cmd_is_alive",
    "cmd_fetch",
    "cmd_restore",
    "cmd_diff",
    "cmd_masstransit_validate",
]
