from functools import wraps
from typing import NamedTuple, Optional

from flask import jsonify, session


class Editor(NamedTuple):
    level: str
    cluster_id: Optional[str]


def current_editor() -> Optional[Editor]:
    """Permission level and cluster resolved upstream by the host app."""

    level = session.get("user_level")
    if not level:
        return None
    return Editor(level=str(level).lower(), cluster_id=session.get("cluster_id"))


def editor_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        editor = current_editor()
        if editor is None:
            return jsonify({"error": "Sign in required."}), 401
        return fn(*args, **kwargs, editor=editor)

    return wrapper
