from __future__ import annotations

import secrets
from dataclasses import dataclass
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class Client:
    client_id: str
    client_secret: str
    redirect_uris: tuple[str, ...]

    @staticmethod
    def new(*, redirect_uris: tuple[str, ...]) -> Client:
        # Ids are generated here so no caller can pick its own client_id.
        return Client(
            client_id=str(uuid4()),
            client_secret=secrets.token_urlsafe(32),
            redirect_uris=tuple(redirect_uris),
        )
