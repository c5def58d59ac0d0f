"""
Operator accounts for the admin API.

Passwords are stored as ``pbkdf2_sha256$<iterations>$<salt hex>$<key hex>``.
Operators authenticate with HTTP Basic on every admin request, so
authenticate_admin is on the hot path; mark_admin_login records the
latest successful request.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from leaguelo.db.models import AdminUser, utcnow

logger = logging.getLogger(__name__)

PBKDF2_ALGORITHM = "sha256"
PBKDF2_ITERATIONS = 390_000
PASSWORD_SCHEME = f"pbkdf2_{PBKDF2_ALGORITHM}"
SALT_SIZE = 16


def _derive_key(password: str, salt: bytes, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        PBKDF2_ALGORITHM, password.encode("utf-8"), salt, iterations
    ).hex()


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Hash a plaintext password for storage in admin_users.password_hash."""
    if not password:
        raise ValueError("Password cannot be empty")
    salt = secrets.token_bytes(SALT_SIZE)
    key = _derive_key(password, salt, iterations)
    return "$".join((PASSWORD_SCHEME, str(iterations), salt.hex(), key))


def verify_password(password: str, stored_hash: str) -> bool:
    """Check a password against a stored hash; malformed hashes never match."""
    parts = stored_hash.split("$")
    if len(parts) != 4 or parts[0] != PASSWORD_SCHEME:
        return False
    _, iterations_raw, salt_hex, expected = parts
    try:
        iterations = int(iterations_raw)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    if iterations < 1:
        return False
    actual = _derive_key(password, salt, iterations)
    return hmac.compare_digest(actual.encode("ascii"), expected.encode("utf-8"))


def normalize_username(username: str) -> str:
    return username.strip().lower()


def find_admin(db: Session, username: str) -> Optional[AdminUser]:
    return db.scalar(
        select(AdminUser).where(AdminUser.username == normalize_username(username))
    )


def authenticate_admin(
    db: Session,
    username: str,
    password: str,
) -> Optional[AdminUser]:
    """Return the active operator matching these credentials, else None."""
    admin = find_admin(db, username)
    if admin is None or not admin.is_active:
        return None
    return admin if verify_password(password, admin.password_hash) else None


def mark_admin_login(db: Session, admin: AdminUser) -> None:
    admin.last_login_at = utcnow()
    db.flush()


def create_or_update_admin_user(
    db: Session,
    username: str,
    password: str,
    is_active: bool = True,
) -> AdminUser:
    """
    Upsert an operator by (normalized) username.

    An existing account gets the new password and active flag.

    Raises:
        ValueError: If the username or password is empty
    """
    normalized = normalize_username(username)
    if not normalized:
        raise ValueError("Username cannot be empty")
    password_hash = hash_password(password)

    admin = find_admin(db, normalized)
    if admin is None:
        admin = AdminUser(username=normalized)
        db.add(admin)
    admin.password_hash = password_hash
    admin.is_active = is_active
    db.flush()
    return admin


def ensure_bootstrap_admin(
    db: Session,
    username: Optional[str],
    password: Optional[str],
) -> Optional[AdminUser]:
    """
    Make sure the operator configured via settings exists and can log in.

    Does nothing unless both values are set. An existing active account whose
    password already matches is left untouched.
    """
    if not username or not password:
        return None

    existing = authenticate_admin(db, username, password)
    if existing is not None:
        return existing

    admin = create_or_update_admin_user(db, username, password)
    logger.info("Bootstrap admin user '%s' created or reset", admin.username)
    return admin
