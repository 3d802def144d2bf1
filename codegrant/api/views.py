"""Consent and error pages.

The core picks a view by name ("approve" or "error") and hands over a
data payload; this module turns that into HTML.  Inline templates keep the
service free of a template engine for two small pages.
"""

from __future__ import annotations

import html

from fastapi import status
from fastapi.responses import HTMLResponse

from codegrant.models.client import Client
from codegrant.models.directives import ViewDirective

_PAGE_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title} — codegrant</title>
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{
      font-family: system-ui, -apple-system, sans-serif;
      display: flex; justify-content: center; align-items: center;
      min-height: 100vh; background: #f5f5f5;
    }}
    .card {{
      background: #fff; padding: 2rem; border-radius: 8px;
      box-shadow: 0 2px 8px rgba(0,0,0,.1); width: 360px;
    }}
    h1 {{ font-size: 1.25rem; margin-bottom: 1rem; text-align: center; }}
    p {{ font-size: .9rem; margin-bottom: 1rem; word-break: break-all; }}
    .actions {{ display: flex; gap: .5rem; }}
    button {{
      flex: 1; padding: .6rem; border: none; border-radius: 4px;
      font-size: .95rem; cursor: pointer;
    }}
    button[name=approve] {{ background: #111; color: #fff; }}
    button[name=deny] {{ background: #ddd; color: #111; }}
    .error {{ color: #c00; }}
  </style>
</head>
<body>
  <div class="card">
{body}
  </div>
</body>
</html>
"""

_APPROVE_BODY = """\
    <h1>Approve this client?</h1>
    <p>Client <code>{client_id}</code> is asking to access your account.</p>
    <form method="post" action="/oauth/approve">
      <input type="hidden" name="reqid" value="{reqid}">
      <div class="actions">
        <button type="submit" name="approve" value="Approve">Approve</button>
        <button type="submit" name="deny" value="Deny">Deny</button>
      </div>
    </form>"""

_ERROR_BODY = """\
    <h1>Authorization error</h1>
    <p class="error">{error}</p>"""


def _render_approve(client: Client, reqid: str) -> str:
    body = _APPROVE_BODY.format(
        client_id=html.escape(client.client_id),
        reqid=html.escape(reqid, quote=True),
    )
    return _PAGE_HTML.format(title="Approve", body=body)


def _render_error(error: str) -> str:
    return _PAGE_HTML.format(
        title="Error", body=_ERROR_BODY.format(error=html.escape(error))
    )


def render_view(directive: ViewDirective) -> HTMLResponse:
    """Render a ViewDirective.  Error views are served with 400."""
    if directive.name == "approve":
        page = _render_approve(directive.data["client"], directive.data["reqid"])
        return HTMLResponse(page)

    page = _render_error(str(directive.data.get("error", "")))
    return HTMLResponse(page, status_code=status.HTTP_400_BAD_REQUEST)
