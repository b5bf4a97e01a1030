"""
Domain Layer: универсальный diff двух коллекций.

Чистые функции сравнения, ничего не знают о RabbitMQ.
Сущности индексируются функцией key, равенство задаётся функцией equal.

Порядок результата фиксирован:
    1. removed/changed в порядке ключей левой коллекции
    2. added в порядке ключей правой коллекции

Повторяющийся ключ внутри одной коллекции: выигрывает первое вхождение,
остальные молча отбрасываются.

Пример использования:
    from rabbitmq_tool.core.domain.diff import diff

    changes = diff(left_queues, right_queues, key=lambda q: q.title.lower(), equal=queue_equal)
    for item in changes:
        print(item)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


class DiffType(str, Enum):
    """Тип расхождения."""
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


@dataclass(frozen=True)
class DiffItem(Generic[T]):
    """
    Одно расхождение.

    Attributes:
        type: added / removed / changed
        left: Значение слева (None для added)
        right: Значение справа (None для removed)
        key: Ключ по которому сопоставлялись значения
    """
    type: DiffType
    left: Optional[T] = None
    right: Optional[T] = None
    key: Any = None

    def __str__(self) -> str:
        return f"type: {self.type.value}, left: {_title(self.left)}, right: {_title(self.right)}"

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь."""
        return {
            "type": self.type.value,
            "key": self.key,
            "left": _as_dict(self.left),
            "right": _as_dict(self.right),
        }


class DiffList(Generic[T]):
    """
    Упорядоченный список расхождений.

    Элементы передаются в конструктор, после построения список не меняется.
    """

    def __init__(self, items: Optional[Iterable[DiffItem[T]]] = None):
        self._items: Tuple[DiffItem[T], ...] = tuple(items or ())

    @property
    def count(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[DiffItem[T]]:
        return iter(self._items)

    def __getitem__(self, index: int) -> DiffItem[T]:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"DiffList({list(self._items)!r})"

    def of_type(self, diff_type: DiffType) -> List[DiffItem[T]]:
        return [item for item in self._items if item.type == diff_type]

    @property
    def added(self) -> List[DiffItem[T]]:
        return self.of_type(DiffType.ADDED)

    @property
    def removed(self) -> List[DiffItem[T]]:
        return self.of_type(DiffType.REMOVED)

    @property
    def changed(self) -> List[DiffItem[T]]:
        return self.of_type(DiffType.CHANGED)

    def summary(self) -> str:
        """Краткая сводка: +added, -removed, ~changed."""
        parts = []
        if self.added:
            parts.append(f"+{len(self.added)} added")
        if self.removed:
            parts.append(f"-{len(self.removed)} removed")
        if self.changed:
            parts.append(f"~{len(self.changed)} changed")
        if not parts:
            return "no changes"
        return ", ".join(parts)

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._items]


def index_by_key(values: Iterable[T], key: Callable[[T], K]) -> Dict[K, T]:
    """
    Индексирует значения по ключу с сохранением порядка.

    При повторе ключа остаётся первое значение.
    """
    indexed: Dict[K, T] = {}
    for value in values:
        k = key(value)
        if k not in indexed:
            indexed[k] = value
    return indexed


def diff_mappings(
    left: Mapping[K, T],
    right: Mapping[K, T],
    equal: Callable[[T, T], bool],
) -> DiffList[T]:
    """
    Сравнивает два уже проиндексированных словаря.

    Args:
        left: Исходное состояние (key → value)
        right: Целевое состояние (key → value)
        equal: Предикат семантического равенства

    Returns:
        DiffList: как превратить left в right
    """
    diffs: List[DiffItem[T]] = []
    seen = set()

    for k, one in left.items():
        seen.add(k)
        if k in right:
            two = right[k]
            if not equal(one, two):
                diffs.append(DiffItem(DiffType.CHANGED, one, two, key=k))
        else:
            diffs.append(DiffItem(DiffType.REMOVED, one, None, key=k))

    for k, two in right.items():
        if k not in seen:
            diffs.append(DiffItem(DiffType.ADDED, None, two, key=k))

    return DiffList(diffs)


def diff(
    left: Iterable[T],
    right: Iterable[T],
    key: Callable[[T], K],
    equal: Callable[[T, T], bool],
) -> DiffList[T]:
    """
    Сравнивает две коллекции.

    Args:
        left: Исходная коллекция
        right: Целевая коллекция
        key: Функция извлечения ключа
        equal: Предикат семантического равенства

    Returns:
        DiffList: removed/changed в порядке left, затем added в порядке right
    """
    return diff_mappings(index_by_key(left, key), index_by_key(right, key), equal)


def _title(value: Any) -> str:
    if value is None:
        return ""
    return getattr(value, "title", None) or repr(value)


def _as_dict(value: Any) -> Any:
    if value is None:
        return None
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value
