import logging
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from app.exceptions import AppError
from app.services.compensation import CompensationStack
from app.utils.db import transactional
from models import db
from models.profile import AuthUser, Profile

logger = logging.getLogger(__name__)


class AccountError(AppError):
    pass


class EmailTaken(AccountError):
    status = 409


class InvalidCredentials(AccountError):
    status = 401


def _delete_auth_user(user_id):
    with transactional("Failed to delete auth user during compensation"):
        AuthUser.query.filter_by(id=user_id).delete()


def sign_up(data) -> Profile:
    """Create the credentials row, then the profile. Undo the first if the second fails."""
    if AuthUser.query.filter_by(email=data.email).first():
        raise EmailTaken("An account with this email already exists")

    try:
        with transactional("Failed to create auth user"):
            auth_user = AuthUser(email=data.email, password_hash=generate_password_hash(data.password))
            db.session.add(auth_user)
    except IntegrityError:
        raise EmailTaken("An account with this email already exists")

    saga = CompensationStack(
        retries=current_app.config.get("COMPENSATION_RETRIES", 3),
        delay=current_app.config.get("COMPENSATION_RETRY_DELAY", 0),
        label=f"signup user={auth_user.id}",
    )
    saga.push(f"delete auth user {auth_user.id}", _delete_auth_user, auth_user.id, ref=auth_user.id)
    try:
        with transactional("Failed to create profile"):
            profile = Profile(
                id=auth_user.id,
                email=data.email,
                full_name=data.full_name,
                phone=data.phone,
                role=data.role,
                business_name=data.business_name if data.role == "fbo" else None,
                business_address=data.business_address if data.role == "fbo" else None,
                business_description=data.business_description if data.role == "fbo" else None,
            )
            db.session.add(profile)
    except Exception as exc:
        for failure in saga.unwind():
            logger.error("Orphaned auth user %s after failed signup", failure.step.ref)
        raise AccountError("Failed to create account", status=500) from exc
    saga.discard()
    return profile


def sign_in(email: str, password: str) -> Profile:
    auth_user = AuthUser.query.filter_by(email=(email or "").strip().lower()).first()
    if not auth_user or not check_password_hash(auth_user.password_hash, password or ""):
        raise InvalidCredentials("Invalid email or password")
    profile = db.session.get(Profile, auth_user.id)
    if not profile:
        raise InvalidCredentials("Account setup incomplete")
    auth_user.last_sign_in_at = datetime.utcnow()
    with transactional("Failed to record sign in"):
        db.session.add(auth_user)
    return profile


def change_password(user_id: int, current_password: str, new_password: str):
    auth_user = db.session.get(AuthUser, user_id)
    if not auth_user or not check_password_hash(auth_user.password_hash, current_password):
        raise AccountError("Current password is incorrect")
    auth_user.password_hash = generate_password_hash(new_password)
    with transactional("Failed to change password"):
        db.session.add(auth_user)


PROFILE_FIELDS = ("full_name", "phone", "avatar_url")
BUSINESS_FIELDS = ("business_name", "business_address", "business_description")


def update_profile(profile: Profile, data) -> Profile:
    """Apply the provided fields. Does NOT commit."""
    changes = data.model_dump(exclude_unset=True)
    fields = PROFILE_FIELDS + (BUSINESS_FIELDS if profile.role == "fbo" else ())
    for key in fields:
        if key in changes:
            setattr(profile, key, changes[key])
    if profile.role == "fbo" and not (profile.business_name or "").strip():
        raise AccountError("Business name is required for food business operators")
    return profile
