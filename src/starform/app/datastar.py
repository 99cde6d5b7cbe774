from typing import Any, Dict, List, Optional

from starlette.requests import Request
from datastar_py.fastapi import read_signals


async def is_datastar_request(request: Request) -> bool:
    """Check if the request is a Datastar request."""
    if "Datastar-Request" in request.headers:
        return True
    return False


def _dig(d: Dict[str, Any], path: List[str]) -> Optional[Dict[str, Any]]:
    """Walk `d` following path segments; return the subtree or None."""
    cur: Any = d
    for seg in path:
        if not isinstance(cur, dict) or seg not in cur:
            return None
        cur = cur[seg]
    return cur if isinstance(cur, dict) else None


async def read_form_signals(request: Request, namespace: str) -> Dict[str, Any]:
    """
    Return the form values a submit request carries.

    * Datastar requests: the `namespace` subtree of the signals
      (`namespace` may contain dots, "Admin.RecordForm").
    * JSON requests: the `namespace` subtree if present, else the whole body.
    * Plain HTML form posts: the `name` input as the draft.

    Raises ValueError when a JSON body cannot be decoded.
    """
    if await is_datastar_request(request):
        signals = await read_signals(request) or {}
        return _dig(signals, namespace.split(".")) or {}

    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        body = await request.json()
        if not isinstance(body, dict):
            raise ValueError("JSON body must be an object")
        return _dig(body, namespace.split(".")) or body

    form = await request.form()
    if "name" in form:
        return {"draft": form["name"]}
    return {}
