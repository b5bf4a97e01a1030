"""
Domain Layer: чистая логика без обращений к брокеру.

- diff.py: универсальный diff коллекций (DiffType, DiffItem, DiffList)
- equality.py: правила сравнения exchange/queue/binding/arguments
- masstransit.py: проверка пар exchange/queue без binding
"""

from .diff import DiffType, DiffItem, DiffList, diff, diff_mappings, index_by_key
from .equality import (
    exchange_equal,
    queue_equal,
    binding_equal,
    binding_strict_equal,
    arguments_equal,
)
from .masstransit import validate_masstransit

__all__ = [
    "DiffType",
    "DiffItem",
    "DiffList",
    "diff",
    "diff_mappings",
    "index_by_key",
    "exchange_equal",
    "queue_equal",
    "binding_equal",
    "binding_strict_equal",
    "arguments_equal",
    "validate_masstransit",
]
