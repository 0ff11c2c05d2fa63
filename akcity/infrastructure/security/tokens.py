"""JWT access/refresh token issuance and verification."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from ...domain.errors import TokenExpiredError, TokenInvalidError
from ...domain.ports.security import TokenPayload, TokenRevocationStore

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class JwtTokenService:
    """Signs short-lived access tokens and long-lived refresh tokens.

    The two token kinds use separate secrets and carry a ``type`` claim, so a
    refresh token can never be presented as an access token. Verification is
    stateless unless a revocation store is supplied.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        *,
        access_token_exp_minutes: int = 15,
        refresh_token_exp_days: int = 7,
        issuer: str = "akcity-api",
        audience: str = "akcity-client",
        algorithm: str = "HS256",
        revocation_store: Optional[TokenRevocationStore] = None,
    ) -> None:
        if not access_secret or not refresh_secret:
            raise RuntimeError("JWT_SECRET and JWT_REFRESH_SECRET must be configured.")
        if access_secret == refresh_secret:
            logger.warning("Access and refresh tokens share the same secret.")
        self._secrets = {ACCESS_TOKEN: access_secret, REFRESH_TOKEN: refresh_secret}
        self._lifetimes = {
            ACCESS_TOKEN: timedelta(minutes=access_token_exp_minutes),
            REFRESH_TOKEN: timedelta(days=refresh_token_exp_days),
        }
        self._issuer = issuer
        self._audience = audience
        self._algorithm = algorithm
        self._revocation_store = revocation_store

    # Issuance -------------------------------------------------------------
    def generate_access_token(self, payload: TokenPayload) -> str:
        return self._encode(payload, ACCESS_TOKEN)

    def generate_refresh_token(self, payload: TokenPayload) -> str:
        return self._encode(payload, REFRESH_TOKEN)

    # Verification ---------------------------------------------------------
    def verify_access_token(self, token: str) -> TokenPayload:
        return self._to_payload(self._decode(token, ACCESS_TOKEN))

    def verify_refresh_token(self, token: str) -> TokenPayload:
        return self._to_payload(self._decode(token, REFRESH_TOKEN))

    def revoke_token(self, token: str) -> None:
        claims = self._decode_for_revocation(token)
        if self._revocation_store is None:
            logger.info("Token %s revoked without a revocation store; it stays valid until expiry", claims["jti"])
            return
        expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        self._revocation_store.revoke(claims["jti"], expires_at)
        logger.info("Revoked %s token %s", claims.get("type"), claims["jti"])

    # Internals ------------------------------------------------------------
    def _encode(self, payload: TokenPayload, token_type: str) -> str:
        now = datetime.now(tz=timezone.utc)
        claims: Dict[str, Any] = {
            "sub": str(payload.user_id),
            "email": payload.email,
            "type": token_type,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self._lifetimes[token_type],
            "iss": self._issuer,
            "aud": self._audience,
        }
        if payload.role:
            claims["role"] = payload.role
        return jwt.encode(claims, self._secrets[token_type], algorithm=self._algorithm)

    def _decode(self, token: str, token_type: str) -> Dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                self._secrets[token_type],
                algorithms=[self._algorithm],
                issuer=self._issuer,
                audience=self._audience,
                options={"require": ["exp", "iat", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(f"{token_type.capitalize()} token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(f"Invalid {token_type} token") from exc
        if claims.get("type") != token_type:
            raise TokenInvalidError(f"Invalid {token_type} token")
        if self._revocation_store is not None and self._revocation_store.is_revoked(claims["jti"]):
            raise TokenInvalidError(f"{token_type.capitalize()} token has been revoked")
        return claims

    def _decode_for_revocation(self, token: str) -> Dict[str, Any]:
        # Expired tokens may still be revoked; the signature must be ours though.
        for token_type, secret in self._secrets.items():
            try:
                claims = jwt.decode(
                    token,
                    secret,
                    algorithms=[self._algorithm],
                    issuer=self._issuer,
                    audience=self._audience,
                    options={"verify_exp": False, "require": ["exp", "jti"]},
                )
            except jwt.InvalidTokenError:
                continue
            if claims.get("type") == token_type:
                return claims
        raise TokenInvalidError("Invalid token")

    @staticmethod
    def _to_payload(claims: Dict[str, Any]) -> TokenPayload:
        email = claims.get("email")
        if not email:
            raise TokenInvalidError("Invalid token")
        return TokenPayload(user_id=claims["sub"], email=email, role=claims.get("role"))
