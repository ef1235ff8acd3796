from __future__ import annotations
from functools import wraps
from flask import request, current_app
from utils.exceptions import TokenError, Unauthorized


def jwt_required():
    """
    Verify the bearer access token once and hand the identity to the view
    as ``identity=(user_id, username)``. No store lookup happens here.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                raise Unauthorized("Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            issuer = current_app.extensions["credential_service"].issuer
            try:
                claims = issuer.verify(token)
            except TokenError as exc:
                raise Unauthorized("Invalid or expired token") from exc

            kwargs["identity"] = (claims["userID"], claims["username"])
            return fn(*args, **kwargs)

        return wrapper

    return decorator
