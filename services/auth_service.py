# services/auth_service.py
import json
import logging
import os
from typing import Optional, Dict, Any

from pydantic import ValidationError as PydanticValidationError
from werkzeug.security import generate_password_hash, check_password_hash

from domain.models.user import User
from middleware.errors import DuplicateKeyError, ValidationError
from repositories.users_repository import UserRepository


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def authenticate(repo: UserRepository, username: str, password: str) -> Optional[Dict[str, Any]]:
    """Return user doc if username/password are valid; otherwise None."""
    user = repo.get_by_username(username)
    if not user:
        return None
    if not check_password_hash(user.password_hash, password):
        return None
    return user.model_dump(exclude={"password_hash"})


def register_user(repo: UserRepository, username: str, password: str, **extra) -> str:
    """Create a new user with a hashed password. Raises on duplicate username."""
    username = (username or "").strip()
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
            details={"password": "too short"},
        )
    if repo.get_by_username(username):
        raise DuplicateKeyError("Username already exists", details={"username": username})
    extra = {k: v for k, v in extra.items() if v not in (None, "")}
    try:
        user = User(username=username, password_hash=generate_password_hash(password), **extra)
    except PydanticValidationError as exc:
        details = {str(e["loc"][0]): e["msg"] for e in exc.errors() if e.get("loc")}
        raise ValidationError("Invalid registration data.", details=details) from exc
    return repo.create(user)


def change_password(repo: UserRepository, username: str, new_password: str) -> bool:
    """Set a new password for an existing user. Returns True if updated."""
    user = repo.get_by_username(username)
    if not user:
        return False
    pw_hash = generate_password_hash(new_password)
    return repo.update(user.id, {"password_hash": pw_hash}) == 1


def _load_admin_users_from_env() -> list[tuple[str, str]]:
    """
    Returns a list of (username, password) from env:
      1) ADMIN_USERS (JSON array of {"username","password"})
      2) ADMIN_USERNAME + ADMIN_PASSWORD (single pair)
    """
    users: list[tuple[str, str]] = []

    raw_json = os.getenv("ADMIN_USERS")
    if raw_json:
        try:
            data = json.loads(raw_json)
            for item in data:
                u = (item.get("username") or "").strip()
                p = item.get("password")
                if u and p is not None:
                    users.append((u, p))
        except (json.JSONDecodeError, AttributeError, TypeError) as e:
            logger.error("Failed to parse ADMIN_USERS JSON: %s", e)

    if not users:
        u = (os.getenv("ADMIN_USERNAME") or "").strip()
        p = os.getenv("ADMIN_PASSWORD")
        if u and p is not None:
            users.append((u, p))

    # Deduplicate by username, keep the first occurrence
    seen = set()
    deduped: list[tuple[str, str]] = []
    for u, p in users:
        if u and u not in seen:
            seen.add(u)
            deduped.append((u, p))
    return deduped


def ensure_default_users(repo: UserRepository) -> int:
    """Idempotently create the configured admin users; returns how many were added."""
    created = 0
    for username, raw_pw in _load_admin_users_from_env():
        if not repo.get_by_username(username):
            repo.create(User(username=username, password_hash=generate_password_hash(raw_pw)))
            created += 1
    if created:
        logger.info("Seeded %d default user(s)", created)
    return created
