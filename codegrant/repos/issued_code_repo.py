from __future__ import annotations

import threading
from typing import Protocol

from codegrant.models.issued_code import IssuedCode


class IssuedCodeRepo(Protocol):
    def add(self, record: IssuedCode) -> None: ...
    def consume(self, code: str) -> IssuedCode | None: ...


class InMemoryIssuedCodeRepo:
    def __init__(self) -> None:
        self._by_code: dict[str, IssuedCode] = {}
        self._lock = threading.Lock()

    def add(self, record: IssuedCode) -> None:
        with self._lock:
            self._by_code[record.code] = record

    def consume(self, code: str) -> IssuedCode | None:
        """Single-use redemption for the token endpoint. Returns None on replay."""
        with self._lock:
            return self._by_code.pop(code, None)
