"""
auth.py
Admin login against the single configured credential (bcrypt-hashed in memory).
"""

from __future__ import annotations

import hmac
import logging
from functools import lru_cache

import bcrypt

import config

logger = logging.getLogger(__name__)


def _to_bcrypt_secret(password: str) -> bytes:
    """
    bcrypt only uses the first 72 BYTES of the password.
    We truncate to 72 bytes to avoid ValueError and to make behavior explicit.
    """
    pw = password.encode("utf-8")
    if len(pw) > 72:
        pw = pw[:72]
    return pw


def hash_password(password: str) -> str:
    secret = _to_bcrypt_secret(password)
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(secret, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(_to_bcrypt_secret(password), password_hash.encode("utf-8"))


@lru_cache(maxsize=1)
def admin_password_hash() -> str:
    # hashed once per process; the plain value stays in config only
    return hash_password(config.ADMIN_PASSWORD)


def login(email: str, password: str) -> bool:
    if not hmac.compare_digest(email.strip().encode("utf-8"), config.ADMIN_EMAIL.encode("utf-8")):
        logger.warning("Login rejected for unknown account %r", email)
        return False
    if not verify_password(password, admin_password_hash()):
        logger.warning("Login rejected for %r: bad password", email)
        return False
    logger.info("Admin %s logged in", email)
    return True


def session_user() -> dict:
    return {"email": config.ADMIN_EMAIL, "name": config.ADMIN_NAME, "role": "admin"}
