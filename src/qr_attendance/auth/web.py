from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, session

from ..common.responses import unauthenticated_response
from ..core.enums import Role
from .capabilities import Principal


def current_principal() -> Optional[Principal]:
    """Principal written into the Flask session by the login layer, if any."""
    user_id = session.get("user_id")
    role = session.get("role")
    if user_id is None or role is None:
        return None
    try:
        return Principal(person_id=int(user_id), role=Role(role))
    except (TypeError, ValueError):
        return None


def principal_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        principal = current_principal()
        if principal is None:
            return unauthenticated_response()
        g.principal = principal
        return view(*args, **kwargs)

    return wrapper
