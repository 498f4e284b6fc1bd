from enum import Enum
from functools import wraps

from flask import g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity

from gramasathi.errors import PermissionDenied, Unauthenticated
from gramasathi.models import user as user_model


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value) -> "Role":
        try:
            return cls(value)
        except ValueError:
            return cls.USER


def load_current_user() -> dict:
    """Resolve the bearer token's subject to a user row, cached on flask.g."""
    cached = g.get("current_user")
    if cached is not None:
        return cached
    verify_jwt_in_request()
    user = user_model.get_user_by_id(get_jwt_identity())
    if not user:
        raise Unauthenticated("User not found")
    g.current_user = user
    return user


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        load_current_user()
        return fn(*args, **kwargs)

    return wrapper


def can_manage_campaign(user: dict, campaign: dict) -> bool:
    if Role.parse(user.get("role")) is Role.ADMIN:
        return True
    return str(user["id"]) == str(campaign["organizer_id"])


def ensure_can_manage_campaign(user: dict, campaign: dict) -> None:
    if not can_manage_campaign(user, campaign):
        raise PermissionDenied("Not authorized to update this campaign")


def require_admin(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = load_current_user()
        if Role.parse(user.get("role")) is not Role.ADMIN:
            raise PermissionDenied("admin role required")
        return fn(*args, **kwargs)

    return wrapper
