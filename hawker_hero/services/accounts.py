import logging
import re

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from ..auth import Identity
from ..errors import Conflict, InvalidCredentials, ValidationError
from ..models import Role, User, db
from . import commit

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def hash_password(raw_password):
    return generate_password_hash(raw_password, method="pbkdf2:sha256")


def register(username, email, password, role=Role.USER) -> Identity:
    """Create an account.

    Checks run in order and stop at the first failure: all fields present,
    password length, email shape, then uniqueness of email and username.
    The public registration form never passes ``role``.
    """
    username = (username or "").strip()
    email = (email or "").strip().lower()
    password = password or ""

    if not username or not email or not password:
        raise ValidationError({"form": "All fields are required."})
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": "Password must be at least 6 characters long."})
    if not EMAIL_RE.match(email):
        raise ValidationError({"email": "Please enter a valid email address."})

    existing = User.query.filter((User.email == email) | (User.username == username)).first()
    if existing:
        raise Conflict()

    user = User(username=username, email=email, password_hash=hash_password(password), role=Role(role))
    db.session.add(user)
    try:
        db.session.flush()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict() from exc
    commit("registering a user")
    logger.info("Registered user %s (%s)", user.id, user.role.value)
    return Identity.from_user(user)


def authenticate(email, password) -> Identity:
    email = (email or "").strip().lower()
    if not email or not password:
        raise ValidationError({"form": "Email and password are required."})
    user = User.query.filter_by(email=email).first()
    if user is None or not check_password_hash(user.password_hash, password):
        raise InvalidCredentials()
    return Identity.from_user(user)
