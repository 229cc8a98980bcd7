from datetime import timedelta

from hawker_hero.models import SessionRecord, db, utcnow
from hawker_hero.sessions import purge_expired_sessions

COOKIE = "hawker_hero_session"


def test_cookie_holds_only_a_signed_id(app, client, user, login):
    login(user)
    value = client.get_cookie(COOKIE).value
    assert "alice" not in value

    sid = app.session_interface._signer(app).unsign(value).decode()
    with app.app_context():
        record = db.session.get(SessionRecord, sid)
        assert record is not None
        assert "alice" in record.data
        assert record.expires_at > utcnow() + timedelta(days=6)


def test_anonymous_visit_stores_nothing(app, client):
    client.get("/stalls")
    assert client.get_cookie(COOKIE) is None
    with app.app_context():
        assert SessionRecord.query.count() == 0


def test_tampered_cookie_is_anonymous(client, user, login):
    login(user)
    value = client.get_cookie(COOKIE).value
    client.set_cookie(COOKIE, value[:-2] + "xx")
    assert client.get("/dashboard").status_code == 302


def test_expired_session_is_anonymous(app, client, user, login):
    login(user)
    with app.app_context():
        SessionRecord.query.update({SessionRecord.expires_at: utcnow() - timedelta(minutes=1)})
        db.session.commit()
    assert client.get("/dashboard").status_code == 302


def test_purge_expired_sessions(app, client, user, login):
    login(user)
    with app.app_context():
        db.session.add(SessionRecord(id="stale", data="{}", expires_at=utcnow() - timedelta(days=1)))
        db.session.commit()
        assert purge_expired_sessions() == 1
        assert SessionRecord.query.count() == 1
