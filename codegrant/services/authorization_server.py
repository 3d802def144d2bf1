from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from codegrant.core.metrics import (
    APPROVE_OUTCOMES,
    AUTHORIZE_OUTCOMES,
    CLIENTS_REGISTERED,
    PENDING_REQUESTS,
)
from codegrant.models.client import Client
from codegrant.models.directives import Directive, RedirectDirective, ViewDirective
from codegrant.models.issued_code import IssuedCode
from codegrant.models.pending_request import PendingAuthorizationRequest
from codegrant.repos.client_repo import ClientRepo, InMemoryClientRepo
from codegrant.repos.issued_code_repo import InMemoryIssuedCodeRepo, IssuedCodeRepo
from codegrant.repos.pending_request_repo import (
    InMemoryPendingRequestRepo,
    PendingRequestRepo,
)
from codegrant.services import client_service
from codegrant.services.redirect_service import build_redirect_url

# ---------------------------------------------------------------------------
# Authorization Server — OAuth2 Authorization Code grant, consent staging
#
#   authorize(query)    — validate client + redirect_uri, stage the request,
#                         ask the user for consent
#   approve(decision)   — resolve the staged request exactly once, redirect
#                         back with a code or an OAuth2 error
#
# Error taxonomy:
#   * request-shape errors (unknown client, bad redirect_uri, unknown reqid)
#     render the "error" view.  We never redirect to an unverified target.
#   * protocol-decision errors (access_denied, unsupported_response_type)
#     redirect to the redirect_uri that was validated at authorize time.
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

ERROR_UNKNOWN_CLIENT = "Unknown client"
ERROR_INVALID_REDIRECT_URI = "Invalid redirect URI"
ERROR_NO_MATCHING_REQUEST = "No matching authorization request"

ERROR_ACCESS_DENIED = "access_denied"
ERROR_UNSUPPORTED_RESPONSE_TYPE = "unsupported_response_type"

SUPPORTED_RESPONSE_TYPE = "code"


class AuthorizationServer:
    """Holds the client registry and pending-request store for one server.

    Each instance owns its own state, so tests (and multiple apps in one
    process) never share clients or staged requests.
    """

    def __init__(
        self,
        client_repo: ClientRepo | None = None,
        pending_repo: PendingRequestRepo | None = None,
        code_repo: IssuedCodeRepo | None = None,
    ) -> None:
        self.client_repo = client_repo or InMemoryClientRepo()
        self.pending_repo = pending_repo or InMemoryPendingRequestRepo()
        self.code_repo = code_repo or InMemoryIssuedCodeRepo()

    # ------------------------------------------------------------------ clients

    def create_client(self, params: Mapping[str, Any] | None = None) -> Client:
        return client_service.create_client(params)

    def register_client(self, params: Mapping[str, Any] | None = None) -> Client:
        client = self.create_client(params)
        self.client_repo.add(client)
        CLIENTS_REGISTERED.inc()
        logger.info(
            "Client registered  client_id=%s redirect_uris=%d",
            client.client_id,
            len(client.redirect_uris),
        )
        return client

    def get_client(self, client_id: object) -> Client | None:
        # Query values can arrive as lists or other non-string shapes.
        if not isinstance(client_id, str):
            return None
        return self.client_repo.get(client_id)

    def list_clients(self) -> list[Client]:
        return self.client_repo.list_all()

    # ---------------------------------------------------------------- authorize

    def authorize(self, query: Mapping[str, Any]) -> ViewDirective:
        client_id = query.get("client_id")
        redirect_uri = query.get("redirect_uri")
        log_extra = {"client_id": client_id}
        logger.info(
            "AUTHZ FLOW [authorize] step 1: received authorization request  "
            "client_id=%s redirect_uri=%s",
            client_id,
            redirect_uri,
            extra=log_extra,
        )

        # FAIL POINT: unknown client_id → error view, no redirect
        client = self.get_client(client_id)
        if client is None:
            logger.warning(
                "AUTHZ FLOW [authorize] FAIL: unknown client_id=%s",
                client_id,
                extra=log_extra,
            )
            AUTHORIZE_OUTCOMES.labels(outcome="unknown_client").inc()
            return ViewDirective("error", {"error": ERROR_UNKNOWN_CLIENT})

        # FAIL POINT: redirect_uri must exactly match a registered URI.
        # No normalization: "http://foo.com" and "http://foo.com/" differ.
        if redirect_uri not in client.redirect_uris:
            logger.warning(
                "AUTHZ FLOW [authorize] FAIL: redirect_uri not registered  "
                "client_id=%s redirect_uri=%s",
                client_id,
                redirect_uri,
                extra=log_extra,
            )
            AUTHORIZE_OUTCOMES.labels(outcome="invalid_redirect_uri").inc()
            return ViewDirective("error", {"error": ERROR_INVALID_REDIRECT_URI})

        record = PendingAuthorizationRequest.new(
            client_id=client_id,
            response_type=query.get("response_type"),
            redirect_uri=redirect_uri,
            state=query.get("state"),
        )
        self.pending_repo.add(record)
        PENDING_REQUESTS.inc()
        AUTHORIZE_OUTCOMES.labels(outcome="approve").inc()
        logger.info(
            "AUTHZ FLOW [authorize] step 2: request staged, asking for consent  "
            "client_id=%s",
            client_id,
            extra=log_extra,
        )
        return ViewDirective("approve", {"client": client, "reqid": record.request_id})

    # ------------------------------------------------------------------ approve

    def approve(self, decision: Mapping[str, Any]) -> Directive:
        reqid = decision.get("reqid")

        # Remove first, check second: whatever the outcome, this request id
        # can never be resolved again.
        record = self.pending_repo.pop(reqid) if isinstance(reqid, str) else None
        if record is None:
            logger.warning("AUTHZ FLOW [approve] FAIL: no matching request  reqid=%s", reqid)
            APPROVE_OUTCOMES.labels(outcome="no_request").inc()
            return ViewDirective("error", {"error": ERROR_NO_MATCHING_REQUEST})
        PENDING_REQUESTS.dec()
        log_extra = {"client_id": record.client_id}

        # Deny is checked before response_type; a denied request with an
        # unsupported type gets access_denied.
        if not decision.get("approve"):
            logger.info(
                "AUTHZ FLOW [approve] user denied access  client_id=%s",
                record.client_id,
                extra=log_extra,
            )
            return self._redirect_with_error(record, ERROR_ACCESS_DENIED)

        if record.response_type != SUPPORTED_RESPONSE_TYPE:
            logger.warning(
                "AUTHZ FLOW [approve] FAIL: unsupported response_type=%r  client_id=%s",
                record.response_type,
                record.client_id,
                extra=log_extra,
            )
            return self._redirect_with_error(record, ERROR_UNSUPPORTED_RESPONSE_TYPE)

        issued = IssuedCode.new(
            client_id=record.client_id,
            redirect_uri=record.redirect_uri,
            state=record.state,
        )
        self.code_repo.add(issued)
        APPROVE_OUTCOMES.labels(outcome="code_issued").inc()
        logger.info(
            "AUTHZ FLOW [approve] authorization code issued  client_id=%s code=%s…",
            record.client_id,
            issued.code[:6],
            extra=log_extra,
        )
        url = build_redirect_url(
            record.redirect_uri or "",
            {"code": issued.code, "state": record.state},
        )
        return RedirectDirective(url)

    def _redirect_with_error(
        self, record: PendingAuthorizationRequest, error: str
    ) -> RedirectDirective:
        APPROVE_OUTCOMES.labels(outcome=error).inc()
        return RedirectDirective(
            build_redirect_url(record.redirect_uri or "", {"error": error})
        )
