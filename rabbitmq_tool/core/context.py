"""
Контекст запуска CLI.

Один RunContext на команду: run_id попадает в каждую строку лога,
dry_run помечает строки restore без изменений на брокере.

    ctx = RunContext.create(command="schema restore", dry_run=True)
    set_current_context(ctx)
"""

import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Literal

logger = logging.getLogger(__name__)

TriggerSource = Literal["cli", "cron", "test"]


def _new_run_id(started_at: datetime, use_timestamp_id: bool) -> str:
    if use_timestamp_id:
        return started_at.strftime("%Y-%m-%dT%H-%M-%S")
    return uuid.uuid4().hex[:8]


@dataclass
class RunContext:
    """
    Контекст выполнения команды.

    Attributes:
        run_id: Timestamp запуска (2025-03-14T12-30-22) или короткий UUID
        started_at: Время начала
        dry_run: restore без вызовов create_*
        triggered_by: Источник запуска (cli/cron/test)
        command: Команда CLI ("schema fetch", "masstransit validate")
        extra: Произвольные данные для отчётов
    """

    run_id: str
    started_at: datetime
    dry_run: bool = False
    triggered_by: TriggerSource = "cli"
    command: str = ""
    extra: dict = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        dry_run: bool = False,
        triggered_by: TriggerSource = "cli",
        command: str = "",
        use_timestamp_id: bool = True,
    ) -> "RunContext":
        started_at = datetime.now()
        ctx = cls(
            run_id=_new_run_id(started_at, use_timestamp_id),
            started_at=started_at,
            dry_run=dry_run,
            triggered_by=triggered_by,
            command=command,
        )
        logger.debug(f"Created RunContext: {ctx.run_id} (command={command!r}, dry_run={dry_run})")
        return ctx

    @property
    def elapsed_seconds(self) -> float:
        return (datetime.now() - self.started_at).total_seconds()

    @property
    def elapsed_human(self) -> str:
        """12.3s, 4m 5s или 1h 2m."""
        elapsed = self.elapsed_seconds
        if elapsed < 60:
            return f"{elapsed:.1f}s"
        minutes, seconds = divmod(int(elapsed), 60)
        if minutes < 60:
            return f"{minutes}m {seconds}s"
        hours, minutes = divmod(minutes, 60)
        return f"{hours}h {minutes}m"

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "command": self.command,
            "triggered_by": self.triggered_by,
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat(),
            "elapsed_seconds": self.elapsed_seconds,
            "extra": self.extra,
        }

    def __str__(self) -> str:
        return f"RunContext({self.run_id}{' [DRY-RUN]' if self.dry_run else ''})"


_current_context: Optional[RunContext] = None


def get_current_context() -> Optional[RunContext]:
    return _current_context


def set_current_context(ctx: Optional[RunContext]) -> None:
    global _current_context
    _current_context = ctx


class RunContextFilter(logging.Filter):
    """
    Добавляет в запись run_id и dry_run текущего контекста.

    run_id, переданный через extra, сохраняется. Без контекста run_id = "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_current_context()
        if not getattr(record, "run_id", None):
            record.run_id = ctx.run_id if ctx else "-"
        if not hasattr(record, "dry_run"):
            record.dry_run = bool(ctx and ctx.dry_run)
        return True
