import pytest

from hawker_hero.errors import NotAuthorized, ValidationError
from hawker_hero.models import Favorite, Stall, db
from hawker_hero.services import favorites

UNAVAILABLE = "That item is unavailable or you do not have access to it."


def test_add_is_idempotent(app, client, user, login, catalog):
    login(user)
    data = {"stall_id": str(catalog["chicken_stall"]), "redirect_to": "/stalls"}
    first = client.post("/favorites/add", data=data, follow_redirects=True)
    assert "Successfully added to favorites!" in first.get_data(as_text=True)
    second = client.post("/favorites/add", data=data, follow_redirects=True)
    assert "This item is already in your favorites" in second.get_data(as_text=True)
    assert second.request.path == "/stalls"
    with app.app_context():
        assert Favorite.query.count() == 1


def test_add_service_returns_existing_row(app, user, catalog):
    with app.app_context():
        favorite, created = favorites.add_favorite(user, stall_id=catalog["chicken_stall"], notes="Lunch")
        again, created_again = favorites.add_favorite(user, stall_id=str(catalog["chicken_stall"]))
    assert (created, created_again) == (True, False)
    assert again.id == favorite.id


def test_add_needs_an_existing_target(app, user, catalog):
    with app.app_context():
        with pytest.raises(ValidationError):
            favorites.add_favorite(user)
        with pytest.raises(ValidationError):
            favorites.add_favorite(user, food_id=999)


def test_add_redirect_stays_on_site(client, user, login, catalog):
    login(user)
    response = client.post(
        "/favorites/add", data={"food_id": str(catalog["laksa"]), "redirect_to": "https://evil.example.com/"}
    )
    assert response.headers["Location"] == "/stalls"


def test_user_sees_only_own_favorites(app, user, other_user, catalog):
    with app.app_context():
        favorites.add_favorite(user, stall_id=catalog["chicken_stall"])
        favorites.add_favorite(other_user, stall_id=catalog["laksa_stall"])

        mine = favorites.list_favorites(user, view="all", user=str(other_user.id))
        assert [f.user_id for f in mine.rows] == [user.id]
        assert mine.extras["show_all"] is False


def test_admin_sees_everyone_or_one_user(app, admin, user, other_user, catalog):
    with app.app_context():
        favorites.add_favorite(user, stall_id=catalog["chicken_stall"])
        favorites.add_favorite(other_user, stall_id=catalog["laksa_stall"])

        everyone = favorites.list_favorites(admin)
        assert everyone.total == 2
        assert everyone.extras["show_all"] is True

        one = favorites.list_favorites(admin, user=str(other_user.id))
        assert [f.user_id for f in one.rows] == [other_user.id]
        assert one.extras["target_user"] == other_user.id

        assert [name for _, name in favorites.users_with_favorites()] == ["alice", "bob"]


def test_search_covers_names_and_notes(app, user, catalog):
    with app.app_context():
        favorites.add_favorite(user, stall_id=catalog["chicken_stall"], notes="Go before noon")
        favorites.add_favorite(user, food_id=catalog["laksa"])
        assert favorites.list_favorites(user, search="noon").total == 1
        assert [f.label for f in favorites.list_favorites(user, search="laksa").rows] == ["Laksa"]


def test_listing_pages_by_nine(app, user):
    with app.app_context():
        stalls = [Stall(name=f"Stall {n:02d}", location="Somewhere", cuisine="Local") for n in range(20)]
        db.session.add_all(stalls)
        db.session.commit()
        for stall in stalls:
            favorites.add_favorite(user, stall_id=stall.id)

        page = favorites.list_favorites(user, page=2)
        assert (len(page.rows), page.total, page.total_pages) == (9, 20, 3)
        assert len(favorites.list_favorites(user, page=3).rows) == 2
        assert favorites.list_favorites(user, page=4).rows == []


def test_list_page_shows_title(client, user, login, catalog):
    login(user)
    client.post("/favorites/add", data={"food_id": str(catalog["chicken_rice"])})
    page = client.get("/favorites").get_data(as_text=True)
    assert "My Favorites" in page
    assert "Chicken Rice" in page


def test_notes_update_and_delete_are_owner_only(app, client, user, other_user, login, catalog):
    with app.app_context():
        favorite_id = favorites.add_favorite(user, stall_id=catalog["chicken_stall"])[0].id
        with pytest.raises(NotAuthorized):
            favorites.update_favorite(other_user, favorite_id, {"notes": "mine now"})

    login(other_user)
    response = client.post(f"/favorites/delete/{favorite_id}", follow_redirects=True)
    assert UNAVAILABLE in response.get_data(as_text=True)
    client.get("/logout")

    login(user)
    client.post(f"/favorites/update/{favorite_id}", data={"notes": "  Ask for extra chilli  "})
    with app.app_context():
        favorite = db.session.get(Favorite, favorite_id)
        assert favorite.notes == "Ask for extra chilli"
        assert favorite.updated_at is not None

    response = client.post(f"/favorites/delete/{favorite_id}")
    assert response.headers["Location"] == "/favorites"
    with app.app_context():
        assert Favorite.query.count() == 0


def test_what_others_love(app, client, user, other_user, make_user, login, catalog):
    carol = make_user("carol")
    with app.app_context():
        favorites.add_favorite(other_user, stall_id=catalog["laksa_stall"], notes="private note")
        favorites.add_favorite(carol, stall_id=catalog["laksa_stall"])
        favorites.add_favorite(carol, food_id=catalog["chicken_rice"])
        favorites.add_favorite(user, stall_id=catalog["chicken_stall"])

        rows = favorites.community_favorites(user).rows
        summary = [(stall.name if stall else None, food.name if food else None, fans) for stall, food, fans in rows]
    assert summary == [("Sungei Road Laksa", None, 2), (None, "Chicken Rice", 1)]

    login(user)
    page = client.get("/favorites/others").get_data(as_text=True)
    assert "2 fans" in page
    assert "private note" not in page
    assert "Tian Tian" not in page
