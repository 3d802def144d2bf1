from __future__ import annotations

import secrets
from dataclasses import dataclass

# •	request_id: str  (opaque, handed to the consent page as "reqid")
# •	client_id: str | None
# •	response_type: str | None
# •	redirect_uri: str | None
# •	state: str | None  (echoed back verbatim, omitted when absent)


@dataclass(frozen=True, slots=True)
class PendingAuthorizationRequest:
    request_id: str
    client_id: str | None
    response_type: str | None
    redirect_uri: str | None
    state: str | None

    @staticmethod
    def new(
        *,
        client_id: str | None,
        response_type: str | None,
        redirect_uri: str | None,
        state: str | None,
    ) -> PendingAuthorizationRequest:
        return PendingAuthorizationRequest(
            request_id=secrets.token_urlsafe(16),
            client_id=client_id,
            response_type=response_type,
            redirect_uri=redirect_uri,
            state=state,
        )
