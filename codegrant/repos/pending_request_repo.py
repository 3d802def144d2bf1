from __future__ import annotations

import threading
from typing import Protocol

from codegrant.models.pending_request import PendingAuthorizationRequest


class PendingRequestRepo(Protocol):
    def add(self, record: PendingAuthorizationRequest) -> None: ...
    def pop(self, request_id: str) -> PendingAuthorizationRequest | None: ...


class InMemoryPendingRequestRepo:
    def __init__(self) -> None:
        self._by_request_id: dict[str, PendingAuthorizationRequest] = {}
        self._lock = threading.Lock()

    def add(self, record: PendingAuthorizationRequest) -> None:
        with self._lock:
            self._by_request_id[record.request_id] = record

    def pop(self, request_id: str) -> PendingAuthorizationRequest | None:
        """Atomically remove and return the staged request.

        Returns None if the id was never staged or was already resolved, so
        two concurrent approvals of the same request see exactly one record.
        """
        with self._lock:
            return self._by_request_id.pop(request_id, None)

    def __len__(self) -> int:
        return len(self._by_request_id)
