"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with identity tokens.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from zapshift.app.core.exceptions import UnauthenticatedError
from zapshift.app.core.identity import IdentityVerifier, Principal, get_identity_verifier

# HTTP Bearer security scheme; missing headers are reported by us, not FastAPI
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    """
    FastAPI dependency for ID-token authentication.

    Every call re-verifies the token with the identity verifier.

    Raises:
        UnauthenticatedError: 401 if the Authorization header is missing or not ``Bearer <token>``
        ForbiddenError: 403 if the identity provider rejects the token
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Unauthorized access")

    return await verifier.verify(credentials.credentials)
