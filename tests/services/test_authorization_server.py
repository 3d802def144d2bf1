from __future__ import annotations

import threading
from urllib.parse import parse_qs, urlsplit

import pytest

from codegrant.models.directives import RedirectDirective, ViewDirective
from codegrant.services.authorization_server import AuthorizationServer
from codegrant.services.client_service import InvalidClientParameters
from tests.conftest import REDIRECT_URI, stage_request

# ---- client registration ----


def test_register_client_then_get_client_returns_equal_client(
    server: AuthorizationServer,
) -> None:
    client = server.register_client({"redirect_uris": ["http://foo.com"]})
    assert server.get_client(client.client_id) == client


def test_create_client_does_not_register(server: AuthorizationServer) -> None:
    client = server.create_client({"redirect_uris": ["http://foo.com"]})
    assert server.get_client(client.client_id) is None
    assert server.list_clients() == []


def test_register_client_propagates_invalid_params(server: AuthorizationServer) -> None:
    with pytest.raises(InvalidClientParameters):
        server.register_client({"redirect_uris": []})
    assert server.list_clients() == []


def test_get_client_unknown_returns_none(server: AuthorizationServer) -> None:
    assert server.get_client("nope") is None
    assert server.get_client(None) is None
    assert server.get_client(["nope"]) is None


def test_list_clients_keeps_registration_order(server: AuthorizationServer) -> None:
    first = server.register_client({"redirect_uris": ["http://a.example"]})
    second = server.register_client({"redirect_uris": ["http://a.example"]})
    assert server.list_clients() == [first, second]


def test_servers_do_not_share_state() -> None:
    a = AuthorizationServer()
    b = AuthorizationServer()
    client = a.register_client({"redirect_uris": ["http://foo.com"]})
    assert b.get_client(client.client_id) is None


# ---- authorize ----


def test_authorize_unknown_client_renders_error(server: AuthorizationServer) -> None:
    directive = server.authorize({"client_id": "does-not-exist"})
    assert directive == ViewDirective("error", {"error": "Unknown client"})


def test_authorize_missing_client_id_renders_error(server: AuthorizationServer) -> None:
    directive = server.authorize({})
    assert directive == ViewDirective("error", {"error": "Unknown client"})


def test_authorize_list_valued_params_render_unknown_client(
    server: AuthorizationServer,
) -> None:
    directive = server.authorize(
        {"client_id": ["abc"], "redirect_uri": ["http://bar.com"]}
    )
    assert directive == ViewDirective("error", {"error": "Unknown client"})


def test_authorize_list_valued_redirect_uri_is_invalid(
    server: AuthorizationServer,
) -> None:
    client = server.register_client({"redirect_uris": ["http://foo.com"]})
    directive = server.authorize(
        {"client_id": client.client_id, "redirect_uri": ["http://foo.com"]}
    )
    assert directive == ViewDirective("error", {"error": "Invalid redirect URI"})
    assert len(server.pending_repo) == 0  # type: ignore[arg-type]


def test_authorize_redirect_uri_mismatch_renders_error(
    server: AuthorizationServer,
) -> None:
    client = server.register_client({"redirect_uris": ["http://foo.com"]})
    directive = server.authorize(
        {"client_id": client.client_id, "redirect_uri": "http://bar.com"}
    )
    assert directive == ViewDirective("error", {"error": "Invalid redirect URI"})


def test_authorize_redirect_uri_match_is_exact(server: AuthorizationServer) -> None:
    client = server.register_client({"redirect_uris": ["http://foo.com"]})
    directive = server.authorize(
        {"client_id": client.client_id, "redirect_uri": "http://foo.com/"}
    )
    assert directive.data == {"error": "Invalid redirect URI"}


def test_authorize_stages_request_and_asks_for_approval(
    server: AuthorizationServer,
) -> None:
    client = server.register_client({"redirect_uris": ["http://foo.com"]})
    directive = server.authorize(
        {
            "client_id": client.client_id,
            "redirect_uri": "http://foo.com",
            "response_type": "code",
        }
    )
    assert directive.name == "approve"
    assert directive.data["client"] == client
    assert directive.data["reqid"]
    assert len(server.pending_repo) == 1  # type: ignore[arg-type]


def test_authorize_issues_distinct_request_ids(server: AuthorizationServer) -> None:
    client = server.register_client({"redirect_uris": [REDIRECT_URI]})
    query = {"client_id": client.client_id, "redirect_uri": REDIRECT_URI}
    first = server.authorize(query).data["reqid"]
    second = server.authorize(query).data["reqid"]
    assert first != second


def test_authorize_error_does_not_stage(server: AuthorizationServer) -> None:
    server.authorize({"client_id": "nope"})
    assert len(server.pending_repo) == 0  # type: ignore[arg-type]


# ---- approve ----


def test_approve_unknown_reqid_renders_error(server: AuthorizationServer) -> None:
    directive = server.approve({"reqid": "1", "approve": True})
    assert directive == ViewDirective(
        "error", {"error": "No matching authorization request"}
    )


def test_approve_missing_reqid_renders_error(server: AuthorizationServer) -> None:
    directive = server.approve({"approve": True})
    assert directive.data == {"error": "No matching authorization request"}


def test_approve_list_valued_reqid_renders_error(server: AuthorizationServer) -> None:
    reqid = stage_request(server)
    directive = server.approve({"reqid": [reqid], "approve": True})
    assert directive.data == {"error": "No matching authorization request"}
    # The staged request is untouched and still resolvable.
    assert isinstance(server.approve({"reqid": reqid, "approve": True}), RedirectDirective)


def test_deny_redirects_with_access_denied(server: AuthorizationServer) -> None:
    reqid = stage_request(server, redirect_uri="http://foo.com")
    directive = server.approve({"reqid": reqid, "approve": False})
    assert directive == RedirectDirective("http://foo.com/?error=access_denied")


def test_unsupported_response_type_redirects_with_error(
    server: AuthorizationServer,
) -> None:
    reqid = stage_request(server, redirect_uri="http://foo.com", response_type="foo")
    directive = server.approve({"reqid": reqid, "approve": True})
    assert directive == RedirectDirective(
        "http://foo.com/?error=unsupported_response_type"
    )


def test_missing_response_type_is_unsupported(server: AuthorizationServer) -> None:
    reqid = stage_request(server, response_type=None)
    directive = server.approve({"reqid": reqid, "approve": True})
    assert isinstance(directive, RedirectDirective)
    assert parse_qs(urlsplit(directive.url).query) == {
        "error": ["unsupported_response_type"]
    }


def test_deny_is_checked_before_response_type(server: AuthorizationServer) -> None:
    reqid = stage_request(server, response_type="token")
    directive = server.approve({"reqid": reqid, "approve": False})
    assert isinstance(directive, RedirectDirective)
    assert parse_qs(urlsplit(directive.url).query) == {"error": ["access_denied"]}


def test_approve_issues_code_and_echoes_state(server: AuthorizationServer) -> None:
    reqid = stage_request(server, state="foo")
    directive = server.approve({"reqid": reqid, "approve": True})

    assert isinstance(directive, RedirectDirective)
    parts = urlsplit(directive.url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == REDIRECT_URI
    query = parse_qs(parts.query)
    assert query["code"][0]
    assert query["state"] == ["foo"]


def test_approve_without_state_omits_state(server: AuthorizationServer) -> None:
    reqid = stage_request(server)
    directive = server.approve({"reqid": reqid, "approve": True})
    query = parse_qs(urlsplit(directive.url).query, keep_blank_values=True)  # type: ignore[union-attr]
    assert set(query) == {"code"}


def test_approve_keeps_existing_redirect_query(server: AuthorizationServer) -> None:
    reqid = stage_request(server, redirect_uri="https://app.example/cb?tenant=a")
    directive = server.approve({"reqid": reqid, "approve": True})
    query = parse_qs(urlsplit(directive.url).query)  # type: ignore[union-attr]
    assert query["tenant"] == ["a"]
    assert query["code"][0]


def test_approve_records_issued_code(server: AuthorizationServer) -> None:
    reqid = stage_request(server, state="s1")
    directive = server.approve({"reqid": reqid, "approve": True})
    code = parse_qs(urlsplit(directive.url).query)["code"][0]  # type: ignore[union-attr]

    issued = server.code_repo.consume(code)
    assert issued is not None
    assert issued.redirect_uri == REDIRECT_URI
    assert issued.state == "s1"
    # Codes are single-use.
    assert server.code_repo.consume(code) is None


def test_denied_request_issues_no_code(server: AuthorizationServer) -> None:
    reqid = stage_request(server)
    server.approve({"reqid": reqid, "approve": False})
    assert server.code_repo._by_code == {}  # type: ignore[attr-defined]


# ---- single resolution ----


@pytest.mark.parametrize("first", [True, False])
@pytest.mark.parametrize("second", [True, False])
def test_second_resolution_is_not_found(
    server: AuthorizationServer, first: bool, second: bool
) -> None:
    reqid = stage_request(server)
    assert isinstance(server.approve({"reqid": reqid, "approve": first}), RedirectDirective)

    again = server.approve({"reqid": reqid, "approve": second})
    assert again == ViewDirective("error", {"error": "No matching authorization request"})


def test_unsupported_type_still_consumes_request(server: AuthorizationServer) -> None:
    reqid = stage_request(server, response_type="foo")
    server.approve({"reqid": reqid, "approve": True})
    assert len(server.pending_repo) == 0  # type: ignore[arg-type]


def test_concurrent_approvals_resolve_once(server: AuthorizationServer) -> None:
    reqid = stage_request(server)
    results: list[object] = []
    barrier = threading.Barrier(8)

    def _resolve() -> None:
        barrier.wait()
        results.append(server.approve({"reqid": reqid, "approve": True}))

    threads = [threading.Thread(target=_resolve) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    redirects = [r for r in results if isinstance(r, RedirectDirective)]
    errors = [r for r in results if isinstance(r, ViewDirective)]
    assert len(redirects) == 1
    assert len(errors) == 7
