"""
Identity token verification.

ID tokens are RS256 JWTs signed by the identity provider (Firebase). The
provider publishes its public certificates as a ``{kid: pem}`` mapping; they
are cached in Redis for the ``max-age`` the endpoint advertises. Verification
results themselves are never cached.
"""

import json
import logging
import re
from functools import lru_cache
from typing import Dict, Optional, Tuple

import httpx
import redis.asyncio as redis
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from pydantic import BaseModel

from zapshift.app.core.config import settings
from zapshift.app.core.exceptions import ForbiddenError, InternalError
from zapshift.app.core.redis_client import redis_client

logger = logging.getLogger(__name__)

CERTS_CACHE_KEY = "identity:signing-certs"
TOKEN_ALGORITHM = "RS256"

_MAX_AGE = re.compile(r"max-age=(\d+)")


class Principal(BaseModel):
    """Identity derived from a verified ID token."""
    subject: str
    email: Optional[str] = None
    email_verified: bool = False


class IdentityVerifier:
    """
    Verifies ID tokens against the identity provider's published certificates.

    Args:
        project_id: Expected ``aud`` claim
        certs_url: Endpoint returning the ``{kid: certificate}`` mapping
        issuer_prefix: ``iss`` is expected to be ``issuer_prefix + project_id``
        cache: Redis-compatible client for the certificate cache (optional)
        default_ttl: Cache lifetime when the endpoint sends no ``max-age``
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        project_id: Optional[str],
        certs_url: str,
        issuer_prefix: str,
        cache=None,
        default_ttl: int = 3600,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.project_id = project_id
        self.certs_url = certs_url
        self.issuer = f"{issuer_prefix}{project_id}"
        self.cache = cache
        self.default_ttl = default_ttl
        self.transport = transport

    async def _fetch_certificates(self) -> Tuple[Dict[str, str], int]:
        try:
            async with httpx.AsyncClient(timeout=10, transport=self.transport) as client:
                response = await client.get(self.certs_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Could not fetch identity signing certificates: %s", exc)
            raise InternalError("Identity provider unavailable")

        ttl = self.default_ttl
        match = _MAX_AGE.search(response.headers.get("cache-control", ""))
        if match:
            ttl = int(match.group(1))
        return response.json(), ttl

    async def signing_keys(self, refresh: bool = False) -> Dict[str, str]:
        """Return the current ``{kid: certificate}`` mapping, from cache when possible."""
        if self.cache is not None and not refresh:
            try:
                cached = await self.cache.get(CERTS_CACHE_KEY)
            except redis.RedisError as exc:
                logger.warning("Certificate cache read failed: %s", exc)
                cached = None
            if cached:
                return json.loads(cached)

        certificates, ttl = await self._fetch_certificates()

        if self.cache is not None:
            try:
                await self.cache.set(CERTS_CACHE_KEY, json.dumps(certificates), ex=ttl)
            except redis.RedisError as exc:
                logger.warning("Certificate cache write failed: %s", exc)
        return certificates

    async def verify(self, token: str) -> Principal:
        """
        Verify an ID token and return its principal.

        Raises:
            ForbiddenError: signature, expiry, audience or issuer check failed
            InternalError: provider not configured or unreachable
        """
        if not self.project_id:
            raise InternalError("Identity provider is not configured")

        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise ForbiddenError("Forbidden: malformed token")

        if header.get("alg") != TOKEN_ALGORITHM:
            raise ForbiddenError("Forbidden: unexpected token algorithm")

        kid = header.get("kid")
        keys = await self.signing_keys()
        if kid not in keys:
            # Keys rotate; a fresh kid may not be cached yet
            keys = await self.signing_keys(refresh=True)
        certificate = keys.get(kid)
        if certificate is None:
            raise ForbiddenError("Forbidden: unknown signing key")

        try:
            claims = jwt.decode(
                token,
                certificate,
                algorithms=[TOKEN_ALGORITHM],
                audience=self.project_id,
                issuer=self.issuer,
            )
        except ExpiredSignatureError:
            raise ForbiddenError("Forbidden: token expired")
        except JWTClaimsError as exc:
            raise ForbiddenError(f"Forbidden: {exc}")
        except JWTError:
            raise ForbiddenError("Forbidden: invalid token")

        subject = claims.get("sub")
        if not subject:
            raise ForbiddenError("Forbidden: token has no subject")

        return Principal(
            subject=subject,
            email=claims.get("email"),
            email_verified=bool(claims.get("email_verified", False)),
        )


@lru_cache
def get_identity_verifier() -> IdentityVerifier:
    """FastAPI dependency returning the process-wide verifier."""
    return IdentityVerifier(
        project_id=settings.identity_project_id,
        certs_url=settings.identity_certs_url,
        issuer_prefix=settings.identity_issuer_prefix,
        cache=redis_client,
        default_ttl=settings.identity_certs_default_ttl,
    )
