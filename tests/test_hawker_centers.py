from hawker_hero.models import HawkerCenter, Stall, db
from hawker_hero.services import hawker_centers


def test_listing_counts_stalls(app, client, catalog):
    with app.app_context():
        db.session.add(HawkerCenter(name="Lau Pa Sat", address="18 Raffles Quay"))
        db.session.commit()
        rows = hawker_centers.list_centers().rows
    assert [(center.name, count) for center, count in rows] == [("Lau Pa Sat", 0), ("Maxwell Food Centre", 1)]

    page = client.get("/hawker-centers").get_data(as_text=True)
    assert "1 stalls" in page


def test_search_matches_name_or_address(app, catalog):
    with app.app_context():
        assert hawker_centers.list_centers(search="kadayanallur").total == 1
        assert hawker_centers.list_centers(facilities="parking").total == 1
        assert hawker_centers.list_centers(facilities="aircon").total == 0


def test_detail_lists_stalls(client, catalog):
    page = client.get(f"/hawker-centers/{catalog['center']}").get_data(as_text=True)
    assert "Maxwell Food Centre" in page
    assert "Tian Tian" in page


def test_admin_creates_center(app, client, admin, login):
    login(admin)
    response = client.post("/hawker-centers", data={"name": "Old Airport Road", "address": "51 Old Airport Rd"})
    assert response.headers["Location"] == "/hawker-centers"
    with app.app_context():
        assert HawkerCenter.query.filter_by(name="Old Airport Road").count() == 1


def test_create_requires_name_and_address(app, client, admin, login):
    login(admin)
    response = client.post("/hawker-centers", data={"name": "Nameless"}, follow_redirects=True)
    assert "Name and Address are required for a hawker center." in response.get_data(as_text=True)
    with app.app_context():
        assert HawkerCenter.query.count() == 0


def test_user_cannot_edit(app, client, user, login, catalog):
    login(user)
    response = client.post(f"/hawker-centers/{catalog['center']}", data={"name": "Renamed", "address": "Here"})
    assert response.headers["Location"] == "/hawker-centers"
    with app.app_context():
        assert db.session.get(HawkerCenter, catalog["center"]).name == "Maxwell Food Centre"


def test_cannot_delete_center_with_stalls(app, client, admin, login, catalog):
    login(admin)
    response = client.post(f"/hawker-centers/{catalog['center']}/delete", follow_redirects=True)
    assert "Cannot delete hawker center. Please remove all associated stalls first." in response.get_data(as_text=True)
    with app.app_context():
        assert db.session.get(HawkerCenter, catalog["center"]) is not None


def test_delete_empty_center(app, client, admin, login, catalog):
    with app.app_context():
        Stall.query.filter_by(center_id=catalog["center"]).update({Stall.center_id: None})
        db.session.commit()
    login(admin)
    response = client.delete(f"/hawker-centers/{catalog['center']}")
    assert response.status_code == 303
    with app.app_context():
        assert HawkerCenter.query.count() == 0
