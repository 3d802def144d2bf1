from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class IssuedCode:
    code: str
    client_id: str | None
    redirect_uri: str | None
    state: str | None
    issued_at: int

    @staticmethod
    def new(
        *,
        client_id: str | None,
        redirect_uri: str | None,
        state: str | None,
    ) -> IssuedCode:
        return IssuedCode(
            code=secrets.token_urlsafe(32),
            client_id=client_id,
            redirect_uri=redirect_uri,
            state=state,
            issued_at=int(datetime.now(UTC).timestamp()),
        )
