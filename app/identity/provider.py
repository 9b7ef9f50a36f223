# app/identity/provider.py
"""
Bearer token identity provider.

Tokens are HS256 JWTs carrying ``sub`` (subject id) and ``email``. The
provider is handed to request handlers through ``get_identity_provider`` so
tests and alternative deployments can swap it without touching globals.
"""
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from fastapi import Depends

from app.core.config import Settings, get_settings
from app.core.errors import Unauthorized
from app.identity.schemas import Identity


class IdentityProvider:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl_min: int = 60):
        if not secret:
            raise RuntimeError("AUTH_JWT_SECRET must be set")
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_min = ttl_min

    def create_access_token(self, user_id: str, email: str, ttl_s: int | None = None) -> str:
        now = datetime.now(timezone.utc)
        ttl = ttl_s if ttl_s is not None else self.ttl_min * 60
        payload: dict[str, Any] = {
            "sub": user_id,
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise Unauthorized("Token expired")
        except jwt.PyJWTError:
            raise Unauthorized("Invalid or expired token")

        sub = claims.get("sub")
        email = claims.get("email")
        if not sub or not email:
            raise Unauthorized("Invalid or expired token")
        return Identity(id=str(sub), email=str(email).strip().lower())


def get_identity_provider(settings: Settings = Depends(get_settings)) -> IdentityProvider:
    return IdentityProvider(
        secret=settings.AUTH_JWT_SECRET,
        algorithm=settings.AUTH_JWT_ALGORITHM,
        ttl_min=settings.AUTH_JWT_TTL_MIN,
    )
