"""
Правила семантического сравнения сущностей топологии.

Строки сравниваются без учёта регистра, bool точно.

Arguments НЕ участвуют в сравнении exchange/queue/binding для diff:
два exchange, отличающиеся только arguments, считаются равными.
Строгое сравнение binding (с arguments) используется только в restore,
чтобы решить есть ли на брокере эквивалентный binding.
"""

from typing import Any, Mapping, Optional

from ..models import Binding, Exchange, Queue


def equals_ignore_case(a: Optional[str], b: Optional[str]) -> bool:
    """Сравнение строк без учёта регистра (None == None)."""
    if a is None or b is None:
        return a is b
    return a.casefold() == b.casefold()


def _same_kind(a: Any, b: Any) -> bool:
    return a is not None and b is not None and type(a) is type(b)


def exchange_equal(a: Optional[Exchange], b: Optional[Exchange]) -> bool:
    """vhost, name, type, durable, auto_delete, internal."""
    return (
        _same_kind(a, b)
        and equals_ignore_case(a.vhost, b.vhost)
        and equals_ignore_case(a.name, b.name)
        and equals_ignore_case(a.type, b.type)
        and a.durable == b.durable
        and a.auto_delete == b.auto_delete
        and a.internal == b.internal
    )


def queue_equal(a: Optional[Queue], b: Optional[Queue]) -> bool:
    """vhost, name, durable, auto_delete."""
    return (
        _same_kind(a, b)
        and equals_ignore_case(a.vhost, b.vhost)
        and equals_ignore_case(a.name, b.name)
        and a.durable == b.durable
        and a.auto_delete == b.auto_delete
    )


def binding_equal(a: Optional[Binding], b: Optional[Binding]) -> bool:
    """vhost, source, destination, destination_type, routing_key, properties_key."""
    return (
        _same_kind(a, b)
        and equals_ignore_case(a.vhost, b.vhost)
        and equals_ignore_case(a.source, b.source)
        and equals_ignore_case(a.destination, b.destination)
        and equals_ignore_case(a.destination_type, b.destination_type)
        and equals_ignore_case(a.routing_key, b.routing_key)
        and equals_ignore_case(a.properties_key, b.properties_key)
    )


def arguments_equal(
    a: Optional[Mapping[str, Any]],
    b: Optional[Mapping[str, Any]],
) -> bool:
    """
    Сравнение arguments.

    Равны если совпадает количество ключей и каждый ключ левой стороны
    есть справа с тем же значением (строковое сравнение без учёта регистра).
    Обратное вхождение отдельно не проверяется, хватает равенства длин.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False
    if len(a) != len(b):
        return False

    for key, value in a.items():
        if key not in b:
            return False
        if not equals_ignore_case(_as_text(value), _as_text(b[key])):
            return False
    return True


def binding_strict_equal(a: Optional[Binding], b: Optional[Binding]) -> bool:
    """binding_equal + arguments_equal. Используется при поиске живого binding."""
    if a is b and a is not None:
        return True
    return binding_equal(a, b) and arguments_equal(a.arguments, b.arguments)


def _as_text(value: Any) -> Optional[str]:
    # bool первым: str(True) == "True", а в JSON это true
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
