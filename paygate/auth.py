from fastapi import Header, HTTPException
from jose import jwt

from paygate.config import get_settings


def verify_token(authorization: str = Header(None)) -> str:
    """Validate the bearer token and return the caller's user id."""
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("unsupported auth scheme")
        claims = jwt.decode(token, get_settings().jwt_secret, algorithms=["HS256"])
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or missing token")

    user_id = claims.get("sub") or claims.get("id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid or missing token")
    return str(user_id)
