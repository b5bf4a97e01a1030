"""
Сериализация snapshot (Schema) в JSON и обратно.

Формат файла:
    {
      "vhosts":    [{"name": "/"}],
      "exchanges": [{"name": ..., "vhost": ..., "type": ..., "durable": ...,
                     "auto_delete": ..., "internal": ..., "arguments": {...}}],
      "queues":    [{"name": ..., "vhost": ..., "durable": ..., "auto_delete": ...,
                     "arguments": {...}}],
      "bindings":  [{"source": ..., "vhost": ..., "destination": ...,
                     "destination_type": ..., "routing_key": ...,
                     "properties_key": ..., "arguments": {...}}]
    }

Порядок полей фиксирован: dump → load → dump даёт тот же текст.
Старые snapshot с PascalCase ключами (VHosts, AutoDelete, ...) читаются.

Пример использования:
    exporter = SnapshotExporter(indent=2)
    exporter.dump(schema, "schema.json")
    schema = exporter.load("schema.json")
"""

import json
import logging
from pathlib import Path
from typing import IO, Optional, Union

from ..core.exceptions import SnapshotError
from ..core.models import Schema

logger = logging.getLogger(__name__)

PathOrStream = Union[str, Path, IO[str]]


class SnapshotExporter:
    """
    Запись и чтение snapshot файлов.

    Attributes:
        indent: Отступ JSON (None = компактный)
        encoding: Кодировка файлов
        ensure_ascii: Экранировать не-ASCII символы
    """

    file_extension = ".json"

    def __init__(
        self,
        indent: Optional[int] = 2,
        encoding: str = "utf-8",
        ensure_ascii: bool = False,
    ):
        self.indent = indent
        self.encoding = encoding
        self.ensure_ascii = ensure_ascii

    def to_json(self, schema: Schema) -> str:
        """Schema → JSON строка."""
        return json.dumps(
            schema.to_dict(),
            indent=self.indent,
            ensure_ascii=self.ensure_ascii,
        )

    def from_json(self, text: str, source: str = "<string>") -> Schema:
        """
        JSON строка → Schema.

        Raises:
            SnapshotError: Невалидный JSON или корень не объект
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Невалидный JSON: {e}", path=source) from e

        if not isinstance(data, dict):
            raise SnapshotError("Корень snapshot должен быть объектом", path=source)

        try:
            return Schema.from_dict(data)
        except (AttributeError, TypeError) as e:
            raise SnapshotError(f"Неожиданная структура snapshot: {e}", path=source) from e

    def dump(self, schema: Schema, target: PathOrStream) -> None:
        """
        Записывает snapshot в файл или поток.

        Args:
            schema: Snapshot
            target: Путь к файлу или открытый текстовый поток
        """
        text = self.to_json(schema) + "\n"

        if hasattr(target, "write"):
            target.write(text)
            return

        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding=self.encoding)
        logger.info(f"Snapshot сохранён: {path} ({schema.summary()})")

    def load(self, source: PathOrStream) -> Schema:
        """
        Читает snapshot из файла или потока.

        Raises:
            SnapshotError: Файл не найден, не читается или невалиден
        """
        if hasattr(source, "read"):
            name = getattr(source, "name", "<stream>")
            return self.from_json(source.read(), source=str(name))

        path = Path(source)
        if not path.exists():
            raise SnapshotError("Snapshot файл не найден", path=str(path))

        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotError(f"Ошибка чтения: {e}", path=str(path)) from e

        schema = self.from_json(text, source=str(path))
        logger.debug(f"Snapshot загружен: {path} ({schema.summary()})")
        return schema


def snapshot_to_json(schema: Schema, indent: Optional[int] = 2) -> str:
    """Schema → JSON строка с настройками по умолчанию."""
    return SnapshotExporter(indent=indent).to_json(schema)


def dump_snapshot(schema: Schema, target: PathOrStream, indent: Optional[int] = 2) -> None:
    SnapshotExporter(indent=indent).dump(schema, target)


def load_snapshot(source: PathOrStream) -> Schema:
    return SnapshotExporter().load(source)
