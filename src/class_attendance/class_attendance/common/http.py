from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict

from flask import jsonify, request

from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def json_errors(failure_message: str):
    """Translate domain exceptions raised by a view into ``{"error": ...}`` responses.

    Unexpected exceptions are logged and answered with ``failure_message`` so
    driver details never reach the client.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            except AuthenticationError as e:
                return jsonify({"error": str(e)}), 401
            except NotFoundError as e:
                return jsonify({"error": str(e)}), 404
            except Exception:
                logger.exception("%s %s failed", request.method, request.path)
                return jsonify({"error": failure_message}), 500

        return wrapper

    return decorator


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
