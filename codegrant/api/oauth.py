from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse

from codegrant.api.dependencies import get_server
from codegrant.api.views import render_view
from codegrant.models.directives import RedirectDirective
from codegrant.services.authorization_server import AuthorizationServer

# ---------------------------------------------------------------------------
# Authorization Server — OAuth2 Authorization Code grant
#
# Endpoints:
#   GET  /oauth/authorize  — validate the client, show the consent page
#   POST /oauth/approve    — the consent form posts here; redirect back to
#                            the client with a code or an error
#
# Token exchange lives outside this service.
# ---------------------------------------------------------------------------

router = APIRouter(prefix="/oauth", tags=["oauth"])


# ========================== GET /oauth/authorize ==========================
# Every parameter is optional at the HTTP level: a missing client_id or
# redirect_uri is answered with the error page, not a 422.


@router.get("/authorize", response_class=HTMLResponse)
def authorize(
    client_id: str | None = Query(None),
    redirect_uri: str | None = Query(None),
    response_type: str | None = Query(None),
    state: str | None = Query(None),
    server: AuthorizationServer = Depends(get_server),
) -> HTMLResponse:
    directive = server.authorize(
        {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "response_type": response_type,
            "state": state,
        }
    )
    return render_view(directive)


# ========================== POST /oauth/approve ===========================
# The consent form has two submit buttons.  Only the clicked one is sent,
# so "approve" being present in the form is the user's yes.


@router.post("/approve", response_model=None)
def approve(
    reqid: str | None = Form(None),
    approve: str | None = Form(None),
    server: AuthorizationServer = Depends(get_server),
) -> RedirectResponse | HTMLResponse:
    directive = server.approve({"reqid": reqid, "approve": approve is not None})

    if isinstance(directive, RedirectDirective):
        return RedirectResponse(url=directive.url, status_code=status.HTTP_302_FOUND)
    return render_view(directive)
