from __future__ import annotations

from fastapi import Request

from codegrant.services.authorization_server import AuthorizationServer


def get_server(request: Request) -> AuthorizationServer:
    """The AuthorizationServer owned by the app handling this request."""
    return request.app.state.authorization_server
