from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from newsboard.config import Settings
from newsboard.errors import AccessDenied

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    name: str
    is_admin: bool = False


class TokenVerifier(Protocol):
    def verify(self, token: str) -> Optional[Caller]:
        ...


class StaticTokenVerifier:
    """
    Resolve bearer tokens against a fixed token -> caller table.
    """

    def __init__(self, tokens: Dict[str, Caller]):
        self._tokens = {token: caller for token, caller in tokens.items() if token}

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticTokenVerifier":
        verifier = cls(
            {
                settings.admin_token: Caller(name=settings.admin_name, is_admin=True),
                settings.reader_token: Caller(name=settings.reader_name, is_admin=False),
            }
        )
        if not verifier._tokens:
            logger.warning("No ADMIN_TOKEN or READER_TOKEN configured; every request will be rejected")
        return verifier

    def verify(self, token: str) -> Optional[Caller]:
        match = None
        # no early exit: every entry is compared
        for known, caller in self._tokens.items():
            if hmac.compare_digest(known.encode(), token.encode()):
                match = caller
        return match


def ensure_admin(caller: Caller) -> None:
    if not caller.is_admin:
        raise AccessDenied("Not authorized as an admin")
