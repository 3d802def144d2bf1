from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from codegrant.main import create_app
from codegrant.models.client import Client
from codegrant.services.authorization_server import AuthorizationServer

# Ensure repo root is on sys.path so `import codegrant` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

REDIRECT_URI = "http://localhost/callback"


@pytest.fixture
def server() -> AuthorizationServer:
    """A fresh server per test, so clients and staged requests never leak."""
    return AuthorizationServer()


@pytest.fixture
def client(server: AuthorizationServer) -> TestClient:
    return TestClient(create_app(server), follow_redirects=False)


@pytest.fixture
def registered_client(server: AuthorizationServer) -> Client:
    return server.register_client({"redirect_uris": [REDIRECT_URI]})


# ---------------------------------------------------------------------------
# Flow helpers
# ---------------------------------------------------------------------------


def stage_request(
    server: AuthorizationServer,
    *,
    redirect_uri: str = REDIRECT_URI,
    response_type: str | None = "code",
    state: str | None = None,
) -> str:
    """Register a client for *redirect_uri*, authorize, and return the reqid."""
    registered = server.register_client({"redirect_uris": [redirect_uri]})
    directive = server.authorize(
        {
            "client_id": registered.client_id,
            "redirect_uri": redirect_uri,
            "response_type": response_type,
            "state": state,
        }
    )
    assert directive.name == "approve"
    return directive.data["reqid"]
