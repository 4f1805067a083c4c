"""
Role gate for the admin API.

Two shared passwords map to two roles. Each request carries its password in
the ``X-Access-Password`` header and gets an explicit ``AuthContext``; the
endpoints that need a role declare it as a dependency.
"""
import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends, Header, HTTPException

from config import Settings, settings

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class AuthContext:
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def _matches(candidate: str, expected: str) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def authenticate(password: Optional[str], config: Settings = settings) -> Optional[AuthContext]:
    if not password:
        return None
    if _matches(password, config.ADMIN_PASSWORD):
        return AuthContext(role=Role.ADMIN)
    if _matches(password, config.USER_PASSWORD):
        return AuthContext(role=Role.USER)
    return None


def get_settings() -> Settings:
    return settings


def get_auth_context(
    x_access_password: Optional[str] = Header(None),
    config: Settings = Depends(get_settings),
) -> AuthContext:
    context = authenticate(x_access_password, config)
    if context is None:
        raise HTTPException(status_code=401, detail="A valid access password is required")
    return context


def require_admin(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not context.is_admin:
        logger.info("Rejected admin action for role %s", context.role.value)
        raise HTTPException(status_code=403, detail="This action requires the admin password")
    return context
