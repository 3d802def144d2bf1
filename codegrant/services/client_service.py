from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from codegrant.models.client import Client

logger = logging.getLogger(__name__)


class InvalidClientParameters(ValueError):
    pass


def create_client(params: Mapping[str, Any] | None = None) -> Client:
    """Build a new Client from registration params without registering it.

    Raises InvalidClientParameters unless ``params["redirect_uris"]`` is a
    non-empty sequence of strings.  Nothing is defaulted.  The URIs are kept
    in order but stored as a tuple: compare ``client.redirect_uris`` with
    ``tuple(uris)``, since a list never equals a tuple.
    """
    redirect_uris = (params or {}).get("redirect_uris")

    if isinstance(redirect_uris, (str, bytes)) or not isinstance(
        redirect_uris, (list, tuple)
    ):
        logger.warning("Rejected client: redirect_uris missing or not a list")
        raise InvalidClientParameters("redirect_uris must be a list of URIs")

    if not redirect_uris:
        logger.warning("Rejected client: redirect_uris is empty")
        raise InvalidClientParameters("redirect_uris must not be empty")

    if not all(isinstance(uri, str) and uri for uri in redirect_uris):
        logger.warning("Rejected client: redirect_uris contains a non-string entry")
        raise InvalidClientParameters("redirect_uris must contain only URI strings")

    return Client.new(redirect_uris=tuple(redirect_uris))
