"""Server-side sessions.

The browser only ever holds a random session id signed with the app secret;
the session contents (identity snapshot, flashes, form scratch data) live in
the ``sessions`` table and expire after ``PERMANENT_SESSION_LIFETIME`` without
a write.
"""
import logging
import secrets

from flask.json.tag import TaggedJSONSerializer
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import CallbackDict

from .models import SessionRecord, db, utcnow

logger = logging.getLogger(__name__)


def _new_sid():
    return secrets.token_urlsafe(32)


class ServerSession(CallbackDict, SessionMixin):
    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid or _new_sid()
        self.new = new
        self.stale_sid = None
        self.modified = False

    def regenerate(self):
        """Move the contents to a fresh id, e.g. after login."""
        if not self.new:
            self.stale_sid = self.sid
        self.sid = _new_sid()
        self.modified = True


class DatabaseSessionInterface(SessionInterface):
    serializer = TaggedJSONSerializer()
    salt = "hawker-hero-session"

    def _signer(self, app):
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt, key_derivation="hmac")

    def open_session(self, app, request):
        signer = self._signer(app)
        if signer is None:
            return None
        cookie = request.cookies.get(self.get_cookie_name(app))
        if not cookie:
            return ServerSession(new=True)
        try:
            sid = signer.unsign(cookie).decode("utf-8")
        except BadSignature:
            return ServerSession(new=True)

        try:
            record = db.session.get(SessionRecord, sid)
        except SQLAlchemyError:
            logger.exception("Could not load session")
            db.session.rollback()
            return ServerSession(new=True)
        if record is None or record.expires_at <= utcnow():
            return ServerSession(new=True)
        try:
            data = self.serializer.loads(record.data)
        except ValueError:
            logger.warning("Discarding unreadable session %s", sid[:8])
            return ServerSession(new=True)
        return ServerSession(data, sid=sid)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)

        if session.accessed:
            response.vary.add("Cookie")

        # drop anything a failed request left pending
        db.session.rollback()

        if not session:
            if session.modified:
                self._delete(session.sid, session.stale_sid)
                response.delete_cookie(
                    name, domain=domain, path=path, secure=secure, samesite=samesite, httponly=httponly
                )
            return

        if not self.should_set_cookie(app, session):
            return

        record = db.session.get(SessionRecord, session.sid) or SessionRecord(id=session.sid)
        record.data = self.serializer.dumps(dict(session))
        record.expires_at = utcnow() + app.permanent_session_lifetime
        db.session.add(record)
        if session.stale_sid:
            SessionRecord.query.filter_by(id=session.stale_sid).delete()
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Could not persist session")
            return

        value = self._signer(app).sign(session.sid.encode("utf-8")).decode("utf-8")
        response.set_cookie(
            name,
            value,
            expires=self.get_expiration_time(app, session),
            httponly=httponly,
            domain=domain,
            path=path,
            secure=secure,
            samesite=samesite,
        )

    def _delete(self, *sids):
        sids = [sid for sid in sids if sid]
        try:
            SessionRecord.query.filter(SessionRecord.id.in_(sids)).delete(synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Could not delete session")


def purge_expired_sessions():
    deleted = SessionRecord.query.filter(SessionRecord.expires_at <= utcnow()).delete(synchronize_session=False)
    db.session.commit()
    return deleted
