"""
Клиент RabbitMQ Management HTTP API.

Работает через requests.Session: basic auth, JSON, таймаут по умолчанию.
Имена vhost/exchange/queue кодируются целиком ("/" → "%2F").

Ошибки:
- HTTP 404 → NotFoundError (restore создаёт сущность)
- другой HTTP код != 2xx → ManagementAPIError
- сеть/таймаут → ManagementConnectionError

Пример использования:
    client = ManagementClient(host="http://localhost", port=15672,
                              username="guest", password="guest")

    queue = client.get_queue("/", "orders")
    exchanges = client.list_exchanges("/")
    client.create_binding("/", "orders", "orders", "queue", routing_key="")
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from ..core.exceptions import (
    ManagementAPIError,
    ManagementConnectionError,
    NotFoundError,
)
from ..core.models import Binding, DestinationType, Exchange, Queue, VHost

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class ManagementSession(requests.Session):
    """
    requests.Session с таймаутом по умолчанию.

    Явный timeout в вызове не перезаписывается.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, verify: bool = True):
        super().__init__()
        self.timeout = timeout
        self.verify = verify
        self.headers.update({"Content-Type": "application/json"})

    def request(self, method, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)


def _segment(value: str) -> str:
    """URL-кодирование сегмента пути (включая "/")."""
    return quote(value or "", safe="")


class ManagementClient:
    """
    Клиент RabbitMQ Management API.

    Attributes:
        base_url: http(s)://host:port
        session: ManagementSession
    """

    def __init__(
        self,
        host: str = "http://localhost",
        port: int = 15672,
        username: str = "guest",
        password: str = "guest",
        verify_ssl: bool = True,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Инициализация клиента.

        Args:
            host: Адрес Management API со схемой (http://rabbit.local)
            port: Порт Management API
            username: Пользователь RabbitMQ
            password: Пароль
            verify_ssl: Проверять SSL сертификат
            timeout: Таймаут HTTP запроса в секундах
            session: Готовая сессия (для тестов)
        """
        if not host:
            raise ValueError("Management host не указан")

        self.base_url = f"{host.rstrip('/')}:{port}"
        self.session = session or ManagementSession(timeout=timeout, verify=verify_ssl)
        self.session.auth = (username, password)

        logger.debug(f"Management клиент инициализирован: {self.base_url}")

    def __repr__(self) -> str:
        return f"ManagementClient({self.base_url!r})"

    # ==================== HTTP ====================

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Выполняет запрос к API.

        Args:
            method: HTTP метод
            path: Путь начиная с /api/
            payload: Тело запроса (JSON)

        Returns:
            Распарсенный JSON или None для пустого ответа
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload)
        except requests.RequestException as e:
            raise ManagementConnectionError(
                f"{method} {path}: {e}", url=self.base_url,
            ) from e

        if response.status_code == 404:
            raise NotFoundError(url=self.base_url, endpoint=path)

        if not 200 <= response.status_code < 300:
            raise ManagementAPIError(
                f"Unexpected HTTP status {response.status_code}: {(response.text or '')[:200]}",
                url=self.base_url,
                status_code=response.status_code,
                endpoint=path,
            )

        if not response.content:
            return None
        return response.json()

    def _get(self, path: str) -> Any:
        return self._request("GET", path)

    # ==================== OVERVIEW ====================

    def get_overview(self) -> Dict[str, Any]:
        """Общая информация о кластере (версия, имя кластера)."""
        return self._get("/api/overview") or {}

    def is_alive(self, vhost: str) -> bool:
        """
        Aliveness-test: брокер может создать очередь и опубликовать в vhost.

        Любая ошибка HTTP/сети трактуется как "не жив".
        """
        try:
            result = self._get(f"/api/aliveness-test/{_segment(vhost)}") or {}
        except (ManagementAPIError, ManagementConnectionError) as e:
            logger.debug(f"Aliveness-test '{vhost}' не прошёл: {e}")
            return False
        return result.get("status") == "ok"

    # ==================== VHOSTS ====================

    def list_vhosts(self) -> List[VHost]:
        return [VHost.from_dict(v) for v in self._get("/api/vhosts") or []]

    def get_vhost(self, name: str) -> VHost:
        return VHost.from_dict(self._get(f"/api/vhosts/{_segment(name)}") or {})

    def create_vhost(self, name: str) -> None:
        self._request("PUT", f"/api/vhosts/{_segment(name)}", {})

    # ==================== EXCHANGES ====================

    def list_exchanges(self, vhost: Optional[str] = None) -> List[Exchange]:
        path = "/api/exchanges" if vhost is None else f"/api/exchanges/{_segment(vhost)}"
        return [Exchange.from_dict(e) for e in self._get(path) or []]

    def get_exchange(self, vhost: str, name: str) -> Exchange:
        path = f"/api/exchanges/{_segment(vhost)}/{_segment(name)}"
        return Exchange.from_dict(self._get(path) or {})

    def create_exchange(self, vhost: str, exchange: Exchange) -> None:
        path = f"/api/exchanges/{_segment(vhost)}/{_segment(exchange.name)}"
        self._request("PUT", path, {
            "type": exchange.type,
            "auto_delete": exchange.auto_delete,
            "durable": exchange.durable,
            "internal": exchange.internal,
            "arguments": dict(exchange.arguments),
        })

    # ==================== QUEUES ====================

    def list_queues(self, vhost: Optional[str] = None) -> List[Queue]:
        path = "/api/queues" if vhost is None else f"/api/queues/{_segment(vhost)}"
        return [Queue.from_dict(q) for q in self._get(path) or []]

    def get_queue(self, vhost: str, name: str) -> Queue:
        path = f"/api/queues/{_segment(vhost)}/{_segment(name)}"
        return Queue.from_dict(self._get(path) or {})

    def create_queue(self, vhost: str, queue: Queue) -> None:
        path = f"/api/queues/{_segment(vhost)}/{_segment(queue.name)}"
        self._request("PUT", path, {
            "auto_delete": queue.auto_delete,
            "durable": queue.durable,
            "arguments": dict(queue.arguments),
        })

    # ==================== BINDINGS ====================

    def list_bindings(self, vhost: Optional[str] = None) -> List[Binding]:
        path = "/api/bindings" if vhost is None else f"/api/bindings/{_segment(vhost)}"
        return [Binding.from_dict(b) for b in self._get(path) or []]

    def get_bindings_for_queue(self, vhost: str, queue: str) -> List[Binding]:
        """Все bindings где очередь: получатель."""
        path = f"/api/queues/{_segment(vhost)}/{_segment(queue)}/bindings"
        return [Binding.from_dict(b) for b in self._get(path) or []]

    def get_bindings_with_destination_exchange(self, vhost: str, exchange: str) -> List[Binding]:
        """Все bindings где exchange: получатель."""
        path = f"/api/exchanges/{_segment(vhost)}/{_segment(exchange)}/bindings/destination"
        return [Binding.from_dict(b) for b in self._get(path) or []]

    def create_binding(
        self,
        vhost: str,
        source: str,
        destination: str,
        destination_type: str,
        routing_key: str = "",
        arguments: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Создаёт binding source → destination.

        Raises:
            ValueError: Неизвестный destination_type
        """
        if destination_type == DestinationType.QUEUE.value:
            kind = "q"
        elif destination_type == DestinationType.EXCHANGE.value:
            kind = "e"
        else:
            raise ValueError(f"Неизвестный destination_type: {destination_type!r}")

        path = (
            f"/api/bindings/{_segment(vhost)}/e/{_segment(source)}"
            f"/{kind}/{_segment(destination)}"
        )
        self._request("POST", path, {
            "routing_key": routing_key or "",
            "arguments": dict(arguments or {}),
        })
