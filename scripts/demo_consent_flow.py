"""Demo: walk the register → authorize → approve/deny flow with TestClient.

Run with:
    python scripts/demo_consent_flow.py
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient

from codegrant.main import create_app

REDIRECT_URI = "http://localhost/callback?tenant=demo"

_REQID_RE = re.compile(r'name="reqid" value="([^"]+)"')


def _reqid(html: str) -> str:
    match = _REQID_RE.search(html)
    assert match, "consent page has no reqid"
    return match.group(1)


def main() -> None:
    client = TestClient(create_app(), follow_redirects=False)

    # ── Step 1: register a client ───────────────────────────────────
    r = client.post("/oauth/clients", json={"redirect_uris": [REDIRECT_URI]})
    client_id = r.json()["client_id"]
    print(f"1. POST /oauth/clients      → {r.status_code}  client_id={client_id}")

    params = {
        "client_id": client_id,
        "redirect_uri": REDIRECT_URI,
        "response_type": "code",
        "state": "demo-state",
    }

    # ── Step 2: authorize with a redirect_uri that was never registered ──
    r = client.get("/oauth/authorize", params={**params, "redirect_uri": "http://evil"})
    print(f"2. GET  /oauth/authorize (bad uri) → {r.status_code}  (error page)")

    # ── Step 3: authorize, then approve ─────────────────────────────
    r = client.get("/oauth/authorize", params=params)
    reqid = _reqid(r.text)
    print(f"3. GET  /oauth/authorize    → {r.status_code}  reqid={reqid}")

    r = client.post("/oauth/approve", data={"reqid": reqid, "approve": "Approve"})
    query = parse_qs(urlparse(r.headers["location"]).query)
    print(
        f"4. POST /oauth/approve      → {r.status_code}  "
        f"code={query['code'][0][:12]}…  state={query['state'][0]}  "
        f"tenant={query['tenant'][0]}"
    )

    # ── Step 5: replay the same reqid ───────────────────────────────
    r = client.post("/oauth/approve", data={"reqid": reqid, "approve": "Approve"})
    print(f"5. POST /oauth/approve (replay) → {r.status_code}  (error page)")

    # ── Step 6: authorize again, then deny ──────────────────────────
    r = client.get("/oauth/authorize", params=params)
    r = client.post("/oauth/approve", data={"reqid": _reqid(r.text), "deny": "Deny"})
    print(f"6. POST /oauth/approve (deny)   → {r.status_code}  {r.headers['location']}")

    print("\nAll steps completed.")


if __name__ == "__main__":
    main()
