"""
Тесты RunContext.
"""

import logging

import pytest

from rabbitmq_tool.core.context import (
    RunContext,
    RunContextFilter,
    get_current_context,
    set_current_context,
)


@pytest.mark.unit
class TestRunContext:
    """Тесты создания контекста."""

    def test_timestamp_id(self):
        """run_id по умолчанию: timestamp."""
        ctx = RunContext.create(command="schema fetch")
        assert ctx.run_id == ctx.started_at.strftime("%Y-%m-%dT%H-%M-%S")
        assert ctx.command == "schema fetch"

    def test_uuid_id(self):
        """Короткий UUID."""
        ctx = RunContext.create(use_timestamp_id=False)
        assert len(ctx.run_id) == 8

    def test_str_dry_run(self):
        """Пометка DRY-RUN."""
        ctx = RunContext.create(dry_run=True)
        assert str(ctx).endswith("[DRY-RUN])")

    def test_to_dict(self):
        """Сериализация."""
        data = RunContext.create(triggered_by="test", command="schema diff").to_dict()
        assert data["triggered_by"] == "test"
        assert data["command"] == "schema diff"
        assert data["dry_run"] is False

    def test_current_context(self):
        """Глобальный контекст."""
        assert get_current_context() is None
        ctx = RunContext.create()
        set_current_context(ctx)
        assert get_current_context() is ctx


@pytest.mark.unit
class TestRunContextFilter:
    """Тесты logging filter."""

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)

    def test_without_context(self):
        """Без контекста run_id = "-"."""
        record = self._record()
        assert RunContextFilter().filter(record) is True
        assert record.run_id == "-"

    def test_with_context(self):
        """run_id из контекста."""
        ctx = RunContext.create()
        set_current_context(ctx)
        record = self._record()

        RunContextFilter().filter(record)

        assert record.run_id == ctx.run_id

    def test_explicit_run_id_kept(self):
        """Явный run_id не перезаписывается."""
        set_current_context(RunContext.create())
        record = self._record()
        record.run_id = "explicit"

        RunContextFilter().filter(record)

        assert record.run_id == "explicit"
