"""What the core hands back to the HTTP layer.

The core never writes a response itself.  It returns either a view to
render (by name, with a data payload) or a URL to redirect the browser to,
and the route turns that into an HTMLResponse or a RedirectResponse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ViewName = Literal["error", "approve"]


@dataclass(frozen=True, slots=True)
class ViewDirective:
    name: ViewName
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RedirectDirective:
    url: str


Directive = ViewDirective | RedirectDirective
