from __future__ import annotations

from typing import Any, Protocol

from socialapp.services.identity.dto import AccountIdentity


class TokenProvider(Protocol):
    """Port for issuing and decoding signed access tokens."""

    def issue(self, identity: AccountIdentity) -> str:
        """
        Build and sign the claim set ``{sub, iss, iat, exp, name, scope}``.

        Pure: no persistence, no I/O.
        """
        ...

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify signature, issuer and expiry and return the claims.

        :raises InvalidAccessTokenError: When any check fails.
        """
        ...
