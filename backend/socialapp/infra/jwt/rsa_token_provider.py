# socialapp/infra/jwt/rsa_token_provider.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, ClassVar

import jwt

from socialapp.core.keys import SigningKeyPair
from socialapp.services._shared.errors import InvalidAccessTokenError
from socialapp.services._shared.ports import TokenProvider
from socialapp.services.identity.dto import AccountIdentity

DEFAULT_ISSUER = "self"
DEFAULT_ACCESS_TTL = timedelta(minutes=15)

REQUIRED_CLAIMS = ("sub", "iss", "iat", "exp")


class TokenSigningError(RuntimeError):
    """The signer rejected the key or claims. A misconfiguration, never retried."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class RSATokenProvider(TokenProvider):
    """
    RS256 access token issuer and verifier (PyJWT).

    The private half signs; any holder of the public half can verify without
    calling back. Claims: ``{sub, iss, iat, exp, name, scope}``.

    :param key_pair: Injected signing key pair.
    :param issuer: ``iss`` claim written and required.
    :param access_ttl: Lifetime added to ``iat`` to produce ``exp``.
    :param clock: Source of "now" (UTC); overridable for tests.
    """

    key_pair: SigningKeyPair
    issuer: str = DEFAULT_ISSUER
    access_ttl: timedelta = DEFAULT_ACCESS_TTL
    clock: Callable[[], datetime] = field(default=_utcnow)

    algorithm: ClassVar[str] = "RS256"

    def issue(self, identity: AccountIdentity) -> str:
        """
        Build and sign the claim set for ``identity``.

        :param identity: Authenticated account identity.
        :returns: Compact JWS string.
        :raises TokenSigningError: If signing fails.
        """
        issued_at = self.clock()
        claims: dict[str, Any] = {
            "sub": str(identity.account_id),
            "iss": self.issuer,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.access_ttl).timestamp()),
            "name": identity.name,
            "scope": list(identity.authorities),
        }
        try:
            return jwt.encode(
                claims,
                self.key_pair.private_key,
                algorithm=self.algorithm,
                headers={"kid": self.key_pair.key_id},
            )
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise TokenSigningError("Access token signing failed") from exc

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify and return the claims of ``token``.

        Rejects a bad signature, a foreign issuer, a missing required claim,
        and any token with ``now >= exp``.

        :param token: Compact JWS string.
        :returns: Verified claims.
        :raises InvalidAccessTokenError: On any verification failure.
        """
        try:
            return jwt.decode(
                token,
                self.key_pair.public_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidAccessTokenError("expired") from exc
        except jwt.PyJWTError as exc:
            raise InvalidAccessTokenError("invalid") from exc
