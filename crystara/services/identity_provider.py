"""Bearer token resolution against the hosted identity service.

Access tokens are HS256 JWTs signed with the project's JWT secret. A token
resolves to an `Identity` when the signature, expiry and audience check out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import jwt


@dataclass
class Identity:
    user_id: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)

    @property
    def role_claim(self) -> Optional[str]:
        app_metadata = self.claims.get("app_metadata") or {}
        if isinstance(app_metadata, dict):
            return app_metadata.get("role")
        return None


class TokenError(Exception):
    """The bearer token is missing or does not resolve to a user."""


class SupabaseIdentityProvider:
    ALGORITHMS = ["HS256"]

    def __init__(self, jwt_secret: str, audience: Optional[str] = "authenticated") -> None:
        self.jwt_secret = jwt_secret
        self.audience = audience
        self.logger = logging.getLogger(__name__)

    def resolve(self, token: Optional[str]) -> Identity:
        if not token:
            raise TokenError("No token provided")
        if not self.jwt_secret:
            raise TokenError("Identity provider is not configured")
        options = {"require": ["sub", "exp"]}
        try:
            claims = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=self.ALGORITHMS,
                audience=self.audience,
                options=options if self.audience else {**options, "verify_aud": False},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            self.logger.debug("Rejected bearer token: %s", exc)
            raise TokenError("Invalid token") from exc

        return Identity(user_id=str(claims["sub"]), email=claims.get("email"), claims=claims)
