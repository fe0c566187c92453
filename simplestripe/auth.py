from fastapi import Header, HTTPException
from jose import JWTError, jwt

from simplestripe.config import jwt_secret


def verify_token(authorization: str = Header(None)):
    """Admin-only routes require an HS256 bearer token."""
    secret = jwt_secret()
    if not authorization or not secret:
        raise HTTPException(status_code=401, detail="Invalid or missing token")
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise HTTPException(status_code=401, detail="Invalid or missing token")
        return jwt.decode(token, secret, algorithms=["HS256"])
    except (ValueError, JWTError):
        raise HTTPException(status_code=401, detail="Invalid or missing token")
