from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from newsboard.access import Caller, StaticTokenVerifier, TokenVerifier
from newsboard.config import get_settings
from newsboard.db.store import ItemStore, get_store

_bearer = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_verifier() -> TokenVerifier:
    return StaticTokenVerifier.from_settings(get_settings())


def store_dependency() -> ItemStore:
    return get_store()


async def get_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    verifier: TokenVerifier = Depends(get_verifier),
) -> Caller:
    """
    Resolve the bearer token to a caller. Missing or unknown tokens are rejected
    here, before any route logic runs.
    """
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Not authorized, no token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    caller = verifier.verify(credentials.credentials)
    if caller is None:
        raise HTTPException(
            status_code=401,
            detail="Not authorized, token failed",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller
