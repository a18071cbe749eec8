from __future__ import annotations

import re
import uuid

from fastapi import Request

from .state import AppState, get_state

_CLIENT_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def get_client_id(request: Request) -> str:
    """Return the client id from the session, assigning a new one if needed."""
    client_id = request.session.get("client_id")
    if not isinstance(client_id, str) or not _CLIENT_ID_RE.match(client_id):
        client_id = uuid.uuid4().hex
        request.session["client_id"] = client_id
    return client_id


def get_app_state(request: Request) -> AppState:
    return get_state(get_client_id(request))
