from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# Redirect URL construction for the approve step.
#
# The registered redirect_uri may already carry a query string
# (e.g. "https://app.example/cb?tenant=a&scope=a&scope=b").  OAuth2 requires
# us to keep it and add our own parameters, so we parse, overlay, and
# re-serialize instead of appending "?code=..." blindly.


def build_redirect_url(uri: str, params: Mapping[str, str | None]) -> str:
    """Return *uri* with *params* merged into its query component.

    Existing pairs keep their order, repeated keys included.  A new parameter
    replaces every existing pair with the same key.  ``None`` values are
    skipped, so an absent state never shows up as ``state=``.  An authority
    URI with an empty path gets "/" as its path.
    """
    parts = urlsplit(uri)

    overlay = [(key, value) for key, value in params.items() if value is not None]
    overlaid = {key for key, _ in overlay}
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in overlaid
    ]
    query.extend(overlay)

    path = parts.path
    if parts.netloc and not path:
        path = "/"

    return urlunsplit(
        (parts.scheme, parts.netloc, path, urlencode(query), parts.fragment)
    )
