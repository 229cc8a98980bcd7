from decimal import Decimal

import pytest

from hawker_hero import create_app
from hawker_hero.models import FoodItem, HawkerCenter, Role, Stall, db
from hawker_hero.services import accounts


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(username="alice", email=None, password="secret1", role=Role.USER):
        with app.app_context():
            return accounts.register(username, email or f"{username}@example.com", password, role=role)
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("alice")


@pytest.fixture
def other_user(make_user):
    return make_user("bob")


@pytest.fixture
def admin(make_user):
    return make_user("admin", role=Role.ADMIN)


@pytest.fixture
def login(client):
    def _login(identity, password="secret1", next_url=None):
        data = {"email": f"{identity.username}@example.com", "password": password}
        query = {"next": next_url} if next_url else None
        return client.post("/login", data=data, query_string=query)
    return _login


@pytest.fixture
def catalog(app):
    """One center holding a stall, plus a second stall; each stall sells one dish."""
    with app.app_context():
        center = HawkerCenter(name="Maxwell Food Centre", address="1 Kadayanallur St", facilities="Toilets, Parking")
        db.session.add(center)
        db.session.flush()
        chicken = Stall(name="Tian Tian", location="Maxwell", cuisine="Chinese", center_id=center.id)
        laksa = Stall(name="Sungei Road Laksa", location="Jalan Berseh", cuisine="Peranakan")
        db.session.add_all([chicken, laksa])
        db.session.flush()
        rice = FoodItem(name="Chicken Rice", price=Decimal("5.00"), stall_id=chicken.id)
        bowl = FoodItem(name="Laksa", price=Decimal("4.50"), stall_id=laksa.id)
        db.session.add_all([rice, bowl])
        db.session.commit()
        return {
            "center": center.id,
            "chicken_stall": chicken.id,
            "laksa_stall": laksa.id,
            "chicken_rice": rice.id,
            "laksa": bowl.id,
        }
