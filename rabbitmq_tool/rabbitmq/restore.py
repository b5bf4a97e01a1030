"""
Restore: идемпотентное восстановление топологии из snapshot.

Брокер доводится до надмножества snapshot: недостающее создаётся,
лишнее НЕ удаляется. Порядок этапов фиксирован, каждый следующий
зависит от предыдущих:

    vhosts → exchanges → queues → bindings

Для каждой сущности:
    1. читаем с брокера по ключу
    2. нашлась: ничего не делаем (debug)
    3. NotFoundError: создаём (info)
    4. любая другая ошибка: error в лог, переходим к следующей

Ошибка одной сущности никогда не прерывает restore. Повторный запуск
доводит прерванный restore до конца: перед каждым созданием есть проверка.

Пример использования:
    from rabbitmq_tool.rabbitmq.restore import SchemaRestore

    result = SchemaRestore(client).restore(schema)
    print(result.summary())
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.context import RunContext, get_current_context
from ..core.domain.equality import binding_strict_equal, equals_ignore_case
from ..core.exceptions import NotFoundError, format_error_for_log
from ..core.logging import get_logger
from ..core.models import Binding, DestinationType, Exchange, Queue, Schema, VHost

logger = get_logger(__name__)

STAGES = ("vhosts", "exchanges", "queues", "bindings")


class RestoreStats:
    """
    Счётчики и заголовки сущностей одного этапа restore.

    Example:
        stats = RestoreStats("queues")
        stats.add("created", "'/orders'")
        stats.created  # 1
    """

    OUTCOMES = ("created", "existing", "skipped", "failed")

    def __init__(self, stage: str):
        self.stage = stage
        self.details: Dict[str, List[str]] = {outcome: [] for outcome in self.OUTCOMES}

    def add(self, outcome: str, title: str) -> None:
        self.details[outcome].append(title)

    @property
    def created(self) -> int:
        return len(self.details["created"])

    @property
    def existing(self) -> int:
        return len(self.details["existing"])

    @property
    def skipped(self) -> int:
        return len(self.details["skipped"])

    @property
    def failed(self) -> int:
        return len(self.details["failed"])

    def summary(self) -> str:
        parts = [f"{outcome}={len(self.details[outcome])}" for outcome in self.OUTCOMES]
        return f"{self.stage}: {', '.join(parts)}"

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {outcome: len(self.details[outcome]) for outcome in self.OUTCOMES}
        result["details"] = {outcome: list(titles) for outcome, titles in self.details.items()}
        return result


@dataclass
class RestoreResult:
    """
    Итог restore по всем этапам.

    Attributes:
        stages: stage → RestoreStats (в порядке выполнения)
        dry_run: Создания только симулировались
    """
    stages: Dict[str, RestoreStats] = field(
        default_factory=lambda: {stage: RestoreStats(stage) for stage in STAGES}
    )
    dry_run: bool = False

    def __getitem__(self, stage: str) -> RestoreStats:
        return self.stages[stage]

    def _total(self, outcome: str) -> int:
        return sum(len(stats.details[outcome]) for stats in self.stages.values())

    @property
    def total_created(self) -> int:
        return self._total("created")

    @property
    def total_existing(self) -> int:
        return self._total("existing")

    @property
    def total_skipped(self) -> int:
        return self._total("skipped")

    @property
    def total_failed(self) -> int:
        return self._total("failed")

    @property
    def has_failures(self) -> bool:
        return self.total_failed > 0

    def summary(self) -> str:
        """Многострочная сводка по этапам."""
        lines = ["Restore" + (" [DRY-RUN]" if self.dry_run else "") + ":"]
        for stats in self.stages.values():
            lines.append(f"  {stats.summary()}")
        lines.append(
            f"  TOTAL: created={self.total_created}, existing={self.total_existing}, "
            f"skipped={self.total_skipped}, failed={self.total_failed}"
        )
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "stages": {stage: stats.to_dict() for stage, stats in self.stages.items()},
        }


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class SchemaRestore:
    """
    Восстановление snapshot на брокере.

    Все обращения к брокеру последовательные, через один клиент.
    """

    def __init__(
        self,
        client,
        dry_run: bool = False,
        context: Optional[RunContext] = None,
    ):
        """
        Args:
            client: ManagementClient (или объект с тем же интерфейсом)
            dry_run: Только проверять наличие, ничего не создавать
            context: Контекст выполнения (если None: глобальный)
        """
        self.client = client
        self.dry_run = dry_run
        self.ctx = context or get_current_context()
        self._logger = logger.bind(run_id=self.ctx.run_id) if self.ctx else logger

    def restore(self, schema: Schema) -> RestoreResult:
        """
        Восстанавливает snapshot: vhosts, exchanges, очереди, bindings.

        Args:
            schema: Желаемая топология

        Returns:
            RestoreResult: Что создано, что уже было, что не удалось
        """
        result = RestoreResult(dry_run=self.dry_run)

        self._restore_vhosts(schema.vhosts, result["vhosts"])
        self._restore_exchanges(schema.exchanges, result["exchanges"])
        self._restore_queues(schema.queues, result["queues"])
        self._restore_bindings(schema.bindings, result["bindings"])

        if result.has_failures:
            self._logger.warning(f"Restore завершён с ошибками: failed={result.total_failed}")
        else:
            self._logger.info(
                f"Restore завершён: created={result.total_created}, "
                f"existing={result.total_existing}"
            )
        return result

    # ==================== ОБЩИЙ ШАГ ====================

    def _guarded(
        self,
        stats: RestoreStats,
        kind: str,
        entity: Any,
        names: Callable[[], Tuple[Any, ...]],
        step: Callable[[str, Any], None],
    ) -> None:
        """
        Обработка одной сущности: ошибка не выходит за её пределы.

        Сущность с пустым именем пропускается молча. Любое исключение
        (брокер, битая запись snapshot) логируется, сущность считается failed.

        Args:
            stats: Счётчики этапа
            kind: vhost / exchange / queue / binding (для сообщений)
            entity: Сущность из snapshot
            names: Имена, без которых сущность не обрабатывается (читаются внутри защиты)
            step: step(title, log): проверка и создание
        """
        title = repr(entity)
        try:
            if any(_is_blank(name) for name in names()):
                return
            title = entity.title
            step(title, self._logger.bind(stage=stats.stage, entity=title))
        except Exception as e:
            self._logger.bind(stage=stats.stage, entity=title).error(
                f"Could not handle the {title} {kind}: {format_error_for_log(e)}"
            )
            stats.add("failed", title)

    def _ensure(
        self,
        stats: RestoreStats,
        kind: str,
        entity: Any,
        names: Callable[[], Tuple[Any, ...]],
        read: Callable[[], Any],
        create: Callable[[], None],
    ) -> None:
        """Проверка наличия (read) + создание (create) при NotFoundError."""
        def step(title: str, log) -> None:
            try:
                read()
            except NotFoundError:
                if self.dry_run:
                    log.info(f"{title} {kind} would be created.")
                else:
                    create()
                    log.info(f"{title} {kind} is created.")
                stats.add("created", title)
            else:
                log.debug(f"{title} {kind} is alive.")
                stats.add("existing", title)

        self._guarded(stats, kind, entity, names, step)

    # ==================== ЭТАПЫ ====================

    def _restore_vhosts(self, vhosts: List[VHost], stats: RestoreStats) -> None:
        for vhost in vhosts:
            self._ensure(
                stats, "vhost", vhost, lambda: (vhost.name,),
                read=lambda: self.client.get_vhost(vhost.name),
                create=lambda: self.client.create_vhost(vhost.name),
            )

    def _restore_exchanges(self, exchanges: List[Exchange], stats: RestoreStats) -> None:
        for exchange in exchanges:
            self._ensure(
                stats, "exchange", exchange, lambda: (exchange.name,),
                read=lambda: self.client.get_exchange(exchange.vhost, exchange.name),
                create=lambda: self.client.create_exchange(exchange.vhost, exchange),
            )

    def _restore_queues(self, queues: List[Queue], stats: RestoreStats) -> None:
        for queue in queues:
            self._ensure(
                stats, "queue", queue, lambda: (queue.name,),
                read=lambda: self.client.get_queue(queue.vhost, queue.name),
                create=lambda: self.client.create_queue(queue.vhost, queue),
            )

    def _restore_bindings(self, bindings: List[Binding], stats: RestoreStats) -> None:
        for binding in bindings:
            self._guarded(
                stats, "binding", binding, lambda: (binding.source, binding.destination),
                lambda title, log: self._restore_binding(binding, title, log, stats),
            )

    def _restore_binding(self, binding: Binding, title: str, log, stats: RestoreStats) -> None:
        alive = self._alive_bindings(binding)
        if alive is None:
            log.warning(
                f"{title} binding skipped: unknown destination type "
                f"{binding.destination_type!r}."
            )
            stats.add("skipped", title)
            return

        if any(binding_strict_equal(live, binding) for live in alive):
            log.debug(f"{title} binding is alive.")
            stats.add("existing", title)
            return

        if self.dry_run:
            log.info(f"{title} binding would be created.")
        else:
            self.client.create_binding(
                binding.vhost,
                binding.source,
                binding.destination,
                binding.destination_type.lower(),
                routing_key=binding.routing_key,
                arguments=binding.arguments,
            )
            log.info(f"{title} binding is created.")
        stats.add("created", title)

    def _alive_bindings(self, binding: Binding) -> Optional[List[Binding]]:
        """
        Живые bindings с тем же получателем.

        Получателя ещё нет на брокере (API отвечает 404): живых bindings нет.

        Returns:
            List[Binding] или None для неизвестного destination_type
        """
        try:
            if equals_ignore_case(binding.destination_type, DestinationType.QUEUE.value):
                return self.client.get_bindings_for_queue(binding.vhost, binding.destination)
            if equals_ignore_case(binding.destination_type, DestinationType.EXCHANGE.value):
                return self.client.get_bindings_with_destination_exchange(
                    binding.vhost, binding.destination,
                )
        except NotFoundError:
            return []
        return None


def restore(schema: Schema, client, dry_run: bool = False) -> RestoreResult:
    """
    Восстанавливает snapshot на брокере.

    Args:
        schema: Желаемая топология
        client: ManagementClient
        dry_run: Только проверять наличие

    Returns:
        RestoreResult: Итог по этапам
    """
    return SchemaRestore(client, dry_run=dry_run).restore(schema)
