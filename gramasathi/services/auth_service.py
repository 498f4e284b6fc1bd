from gramasathi.models import user as user_model
import re
import bcrypt
from typing import Dict, Any, Mapping
from flask_jwt_extended import create_access_token, create_refresh_token

from gramasathi.errors import Unauthenticated, ValidationError
from gramasathi.services.validation import text_fields
from gramasathi.utils.authz import Role

EMAIL_RE = re.compile(r"^[^@]+@[^@]+\.[^@]+$")
MIN_PASSWORD_LENGTH = 8
PROFILE_FIELDS = ("name", "phone", "village", "district", "state", "preferredLanguage")


def _normalize_email(email) -> str:
    return email.strip().lower() if isinstance(email, str) else ""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash or not isinstance(password, str):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def public_user(user: Mapping) -> Dict[str, Any]:
    return {
        "id": user["id"],
        "name": user.get("name"),
        "email": user.get("email"),
        "phone": user.get("phone"),
        "village": user.get("village"),
        "district": user.get("district"),
        "state": user.get("state"),
        "preferredLanguage": user.get("preferred_language"),
        "role": Role.parse(user.get("role")).value,
        "profilePicture": user.get("profile_picture"),
    }


def _make_tokens(user: Mapping) -> Dict[str, str]:
    claims = {"role": Role.parse(user.get("role")).value}
    return {
        "accessToken": create_access_token(
            identity=str(user["id"]), additional_claims=claims
        ),
        "refreshToken": create_refresh_token(
            identity=str(user["id"]), additional_claims=claims
        ),
    }


def signup_user(data: Mapping) -> dict:
    email = _normalize_email(data.get("email"))
    password = data.get("password") or ""

    errors: Dict[str, str] = {}
    texts = text_fields(data, PROFILE_FIELDS, errors)
    if not texts["name"]:
        errors.setdefault("name", "Name is required")
    if not EMAIL_RE.match(email):
        errors["email"] = "Invalid email format"
    if not isinstance(password, str):
        errors["password"] = "Password must be a string"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = (
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if errors:
        raise ValidationError("Validation failed", errors)
    if user_model.get_user_by_email(email):
        raise ValidationError("Email already registered", {"email": "already registered"})

    user = user_model.create_user(
        email=email,
        password_hash=hash_password(password),
        name=texts["name"],
        phone=texts["phone"],
        village=texts["village"],
        district=texts["district"],
        state=texts["state"],
        preferred_language=texts["preferredLanguage"],
    )
    return {"user": public_user(user), **_make_tokens(user)}


def login_user(data: Mapping) -> dict:
    email = _normalize_email(data.get("email"))
    password = data.get("password") or ""

    user = user_model.get_user_by_email(email)
    if not user or not verify_password(password, user.get("password_hash")):
        raise Unauthenticated("Invalid credentials")
    return {"user": public_user(user), **_make_tokens(user)}
