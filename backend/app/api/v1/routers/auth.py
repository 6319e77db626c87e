import datetime as dt
import re

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from tortoise.exceptions import IntegrityError

from app.api.v1.deps import get_current_user
from app.core.errors import AuthenticationError, ConflictError, ValidationError
from app.core.responses import created, envelope
from app.core.security import MIN_PASSWORD_LENGTH, create_access_token, hash_password, verify_password
from app.models.user import User

router = APIRouter(prefix="/users", tags=["auth"])

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

class SignupIn(BaseModel):
    firstName: str | None = None
    lastName: str | None = None
    username: str | None = None
    email: str | None = None
    password: str | None = None
    isArtist: bool = False

class LoginIn(BaseModel):
    email: str | None = None
    password: str | None = None

class ChangePasswordIn(BaseModel):
    oldPassword: str | None = None
    newPassword: str | None = None

def _token_payload(user: User) -> dict:
    return {"id": str(user.id), "isArtist": user.is_artist,
            "token": create_access_token(str(user.id), user.is_artist)}

async def taken_fields(username: str | None, email: str | None, exclude_id=None) -> list[str]:
    """Names of the unique fields already used by another account."""
    fields = []
    for name, value in (("username", username), ("email", email)):
        if value is None:
            continue
        qs = User.filter(**{name: value})
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        if await qs.exists():
            fields.append(name)
    return fields

@router.post("/signup")
async def signup(body: SignupIn):
    """
    Register a new account and return a bearer token.

    Validation order: required fields, email format, password length, then
    uniqueness. Every colliding unique field is listed in `data.fields`.

    Returns (201):
        data: {id, isArtist, token}

    Errors:
        - 400: missing field, invalid email, password shorter than 8 characters
        - 409: username and/or email already registered
    """
    # Basic validation, avoid pydantic error becoming 500
    if not all([body.firstName, body.lastName, body.username, body.email, body.password]):
        raise ValidationError("Please fill in all required fields.")
    if not EMAIL_RE.match(body.email):
        raise ValidationError("Please enter a valid email address to sign up.")
    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"The password should be at least {MIN_PASSWORD_LENGTH} characters long.")

    conflicts = await taken_fields(body.username, body.email)
    if conflicts:
        raise ConflictError(f"Already in use: {', '.join(conflicts)}", data={"fields": conflicts})

    try:
        u = await User.create(
            first_name=body.firstName,
            last_name=body.lastName,
            username=body.username,
            email=body.email,
            password_hash=hash_password(body.password),
            is_artist=body.isArtist,
        )
    except IntegrityError:
        # Lost a race against a concurrent signup with the same username/email
        conflicts = await taken_fields(body.username, body.email)
        raise ConflictError("Username or email already in use", data={"fields": conflicts})
    return created(_token_payload(u))

@router.post("/login")
async def login(body: LoginIn):
    """
    Authenticate with email + password.

    Returns:
        data: {id, isArtist, token}

    Errors:
        - 401: missing fields or credentials do not match
    """
    if not body.email or not body.password:
        raise AuthenticationError("Please fill in all required fields.")
    user = await User.get_or_none(email=body.email)
    if not user or not verify_password(body.password, user.password_hash):
        raise AuthenticationError("Invalid email or password. Please try again.")
    return envelope(_token_payload(user))

@router.put("/change-password")
async def change_password(body: ChangePasswordIn, user: User = Depends(get_current_user)):
    """
    Change the password of the logged-in user.

    The old password is re-verified. Tokens issued before the change stop working.

    Errors:
        - 400: missing fields, wrong old password, new == old, new too short
        - 401: not authenticated
    """
    if not body.oldPassword or not body.newPassword:
        raise ValidationError("Please fill in all fields.")
    if not verify_password(body.oldPassword, user.password_hash):
        raise ValidationError("Old password is incorrect.")
    if body.oldPassword == body.newPassword:
        raise ValidationError("New password must be different from old password.")
    if len(body.newPassword) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"The password should be at least {MIN_PASSWORD_LENGTH} characters long.")

    user.password_hash = hash_password(body.newPassword)
    user.password_changed_at = dt.datetime.now(dt.timezone.utc)
    await user.save()
    return envelope(_token_payload(user), message="Password changed successfully")
