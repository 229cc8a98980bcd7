"""Identity snapshot kept in the session and the authorization gates."""
import logging
from dataclasses import dataclass
from functools import wraps

from flask import g, session

from .errors import NotAuthenticated, NotAuthorized
from .models import Role

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


@dataclass(frozen=True)
class Identity:
    id: int
    username: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(id=user.id, username=user.username, role=Role(user.role))

    def to_session(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role.value}

    @classmethod
    def from_session(cls, data) -> "Identity | None":
        if not data:
            return None
        try:
            return cls(id=int(data["id"]), username=data["username"], role=Role(data["role"]))
        except (KeyError, TypeError, ValueError):
            return None


def sign_in(identity: Identity) -> None:
    session.clear()
    session.regenerate()
    session[SESSION_USER_KEY] = identity.to_session()
    session.permanent = True
    g.user = identity


def sign_out() -> None:
    session.clear()
    g.user = None


def load_identity() -> None:
    g.user = Identity.from_session(session.get(SESSION_USER_KEY))


def require_authenticated() -> Identity:
    user = g.get("user")
    if user is None:
        raise NotAuthenticated()
    return user


def require_admin() -> Identity:
    user = require_authenticated()
    if not user.is_admin:
        logger.info("User %s refused admin access", user.id)
        raise NotAuthorized()
    return user


def require_owner_or_admin(identity: Identity, owner_id: int) -> None:
    if identity.is_admin or identity.id == owner_id:
        return
    logger.info("User %s refused access to a resource owned by %s", identity.id, owner_id)
    raise NotAuthorized()


def login_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        require_authenticated()
        return view_func(*args, **kwargs)
    return wrapper


def admin_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        require_admin()
        return view_func(*args, **kwargs)
    return wrapper
