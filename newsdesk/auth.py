"""
Access-token verification and profile provisioning.

The auth provider issues HS256 access tokens carrying ``sub`` (the user id),
``email`` and optionally ``user_metadata.full_name``. Signing in happens
with the provider; this module only verifies tokens and turns them into an
``Identity``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable

import jwt

from newsdesk.db import DbClient
from newsdesk.errors import AuthenticationRequired, ConflictError
from newsdesk.identity import Identity, Role

logger = logging.getLogger(__name__)


@dataclass
class TokenClaims:
    user_id: str
    email: str
    full_name: str = ""


class TokenVerifier:
    def __init__(self, secret: str, audience: str = "authenticated"):
        if not secret:
            raise ValueError("A signing secret is required to verify tokens")
        self.secret = secret
        self.audience = audience

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=["HS256"],
                audience=self.audience,
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationRequired("Session expired", cause=exc) from exc
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected access token: %s", exc)
            raise AuthenticationRequired("Invalid access token", cause=exc) from exc

        metadata = payload.get("user_metadata") or {}
        return TokenClaims(
            user_id=str(payload["sub"]),
            email=payload.get("email", ""),
            full_name=metadata.get("full_name", "") or "",
        )

    def issue(
        self, user_id: str, email: str, full_name: str = "", ttl: int = 3600
    ) -> str:
        """Mint a token the way the provider does (local development and tests)."""
        now = int(time.time())
        payload = {
            "sub": user_id,
            "email": email,
            "aud": self.audience,
            "iat": now,
            "exp": now + ttl,
            "user_metadata": {"full_name": full_name},
        }
        return jwt.encode(payload, self.secret, algorithm="HS256")


def provision_identity(
    db: DbClient, claims: TokenClaims, admin_emails: Iterable[str] = ()
) -> Identity:
    """Return the identity for ``claims``, creating profile and role on first sight.

    A profile without any role gets ``user``, or ``admin`` when its email is
    listed in ``admin_emails``.
    """
    try:
        profile, created = db.ensure_profile(
            claims.user_id, claims.email, claims.full_name
        )
        if created:
            logger.info("Provisioned profile %s", profile.id)
    except ConflictError:
        # Another request provisioned the same user first.
        profile = db.get_profile(claims.user_id)
        if profile is None:
            raise
    roles = db.get_roles(profile.id)
    if not roles:
        # Also covers a profile left roleless by an earlier failed assignment.
        admins = {email.strip().lower() for email in admin_emails}
        role = Role.ADMIN if claims.email.lower() in admins else Role.USER
        db.add_role(profile.id, role)
        logger.info("Assigned role %s to profile %s", role.value, profile.id)
        roles = db.get_roles(profile.id)

    return Identity(
        user_id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        roles=frozenset(roles),
    )
