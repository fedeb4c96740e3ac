"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. There is
no server-side session or revocation list: a token is valid until it
expires (7 days by default), and logging out means the client drops it.

The claims are a snapshot of the user at issuance time
({id, username, email, role}); a role change only shows up in tokens
issued after it. Tokens are bound to an issuer and audience so a token
minted by another service with the same secret is still rejected.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from fastapi import Request

from inkwell.config import Settings
from inkwell.errors import InvalidTokenError, TokenExpiredError

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Claims:
    """Decoded payload of a verified token."""

    id: str
    username: str
    email: str
    role: str
    iss: str
    aud: str
    exp: int
    iat: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Claims":
        aud = payload["aud"]
        return cls(
            id=str(payload["id"]),
            username=payload["username"],
            email=payload["email"],
            role=payload["role"],
            iss=payload["iss"],
            aud=aud[0] if isinstance(aud, list) else aud,
            exp=int(payload["exp"]),
            iat=int(payload["iat"]),
        )


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header.

    Only the exact, case-sensitive "Bearer " prefix counts; any other
    scheme, or an empty token, is treated as no token at all.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):] or None


class TokenService:
    """Issues and verifies signed bearer tokens."""

    _required_claims = ["id", "username", "email", "role", "iss", "aud", "exp", "iat"]

    def __init__(self, settings: Settings):
        self._secret = settings.jwt_secret.get_secret_value()
        self.algorithm = settings.jwt_algorithm
        self.issuer = settings.jwt_issuer
        self.audience = settings.jwt_audience
        self.lifetime = timedelta(minutes=settings.jwt_expire_minutes)

    def issue_token(self, user, *, now: Optional[datetime] = None) -> str:
        """Create a token for ``user`` (anything with id/username/email/role)."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": str(user.id),
            "username": user.username,
            "email": user.email,
            "role": str(getattr(user.role, "value", user.role)),
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Claims:
        """Verify and decode a token.

        Raises TokenExpiredError once past expiry, InvalidTokenError for
        anything else (bad signature, wrong issuer/audience, garbage).
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": self._required_claims},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError:
            raise InvalidTokenError()
        return Claims.from_payload(payload)


def get_token_service(request: Request) -> TokenService:
    """FastAPI dependency — the token service built at startup."""
    return request.app.state.tokens
