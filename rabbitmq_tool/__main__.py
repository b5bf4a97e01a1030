"""
Точка входа для запуска модуля.

Позволяет запускать утилиту как:
    python -m rabbitmq_tool [команда] [опции]

Примеры:
    python -m rabbitmq_tool schema fetch -o schema.json
    python -m rabbitmq_tool schema restore -i schema.json
    python -m rabbitmq_tool schema diff --left a.json --right b.json
    python -m rabbitmq_tool masstransit validate
"""

from .cli import main

if __name__ == "__main__":
    main()
