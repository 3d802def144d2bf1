"""Client registration endpoints.

POST returns the client_secret exactly once; the read endpoints never
include it.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from codegrant.api.dependencies import get_server
from codegrant.models.client import Client
from codegrant.services.authorization_server import AuthorizationServer
from codegrant.services.client_service import InvalidClientParameters

router = APIRouter(prefix="/oauth/clients", tags=["clients"])


# --- Request / Response schemas -------------------------------------------


class ClientRegistrationIn(BaseModel):
    # Optional here so the service, not pydantic, decides what is invalid.
    redirect_uris: list[str] | None = None


class ClientOut(BaseModel):
    client_id: str
    redirect_uris: list[str]


class RegisteredClientOut(ClientOut):
    client_secret: str


def _to_out(client: Client) -> ClientOut:
    return ClientOut(client_id=client.client_id, redirect_uris=list(client.redirect_uris))


# --- POST /oauth/clients --------------------------------------------------


@router.post(
    "",
    response_model=RegisteredClientOut,
    status_code=status.HTTP_201_CREATED,
)
def register_client(
    payload: ClientRegistrationIn,
    server: AuthorizationServer = Depends(get_server),
) -> RegisteredClientOut:
    try:
        client = server.register_client(payload.model_dump())
    except InvalidClientParameters as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc)},
        ) from None

    return RegisteredClientOut(
        client_id=client.client_id,
        client_secret=client.client_secret,
        redirect_uris=list(client.redirect_uris),
    )


# --- GET /oauth/clients ---------------------------------------------------


@router.get("", response_model=list[ClientOut])
def list_clients(
    server: AuthorizationServer = Depends(get_server),
) -> list[ClientOut]:
    return [_to_out(c) for c in server.list_clients()]


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    client_id: str,
    server: AuthorizationServer = Depends(get_server),
) -> ClientOut:
    client = server.get_client(client_id)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Unknown client"},
        )
    return _to_out(client)
