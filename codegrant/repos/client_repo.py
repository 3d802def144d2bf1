from __future__ import annotations

import threading
from typing import Protocol

from codegrant.models.client import Client


class ClientRepo(Protocol):
    def get(self, client_id: str) -> Client | None: ...
    def add(self, client: Client) -> None: ...
    def list_all(self) -> list[Client]: ...


class InMemoryClientRepo:
    """Append-only registry.  Dict insertion order doubles as registration order."""

    def __init__(self) -> None:
        self._by_client_id: dict[str, Client] = {}
        self._lock = threading.Lock()

    def get(self, client_id: str) -> Client | None:
        return self._by_client_id.get(client_id)

    def add(self, client: Client) -> None:
        with self._lock:
            if client.client_id in self._by_client_id:
                raise ValueError("client_id already exists")
            self._by_client_id[client.client_id] = client

    def list_all(self) -> list[Client]:
        with self._lock:
            return list(self._by_client_id.values())
