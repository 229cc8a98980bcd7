from hawker_hero.models import Recommendation, db
from hawker_hero.services import dashboard, favorites, reviews


def test_new_user_dashboard_is_empty(client, user, login):
    login(user)
    page = client.get("/dashboard").get_data(as_text=True)
    assert '<span id="reviews-count">0</span>' in page
    assert "No activity yet." in page


def test_counts_and_activity(app, client, user, other_user, login, catalog):
    with app.app_context():
        for n in range(4):
            reviews.create_review(user, {"stall_id": catalog["laksa_stall"], "rating": "3", "comment": f"Visit {n}"})
        reviews.create_review(other_user, {"stall_id": catalog["laksa_stall"], "rating": "1", "comment": "Not mine"})
        favorites.add_favorite(user, food_id=catalog["chicken_rice"], notes="Extra chilli")
        db.session.add(Recommendation(user_id=user.id, stall_id=catalog["chicken_stall"], tip="x" * 80))
        db.session.commit()

        data = dashboard.user_dashboard(user)

    assert data["stats"] == {"reviews_count": 4, "favorites_count": 1, "recommendations_count": 1}
    assert [r.comment for r in data["recent_reviews"]] == ["Visit 3", "Visit 2", "Visit 1"]
    assert len(data["recent_activity"]) == 5
    assert [entry["kind"] for entry in data["recent_activity"][:2]] == ["recommendation", "favorite"]
    assert data["recent_activity"][0]["details"] == "x" * 50 + "..."
    assert data["recent_activity"][1]["details"] == "Note: Extra chilli"

    login(user)
    page = client.get("/dashboard").get_data(as_text=True)
    assert '<span id="reviews-count">4</span>' in page
    assert "You added <strong>Chicken Rice</strong> to favorites" in page


def test_admin_stats(app, admin, user, catalog):
    with app.app_context():
        reviews.create_review(user, {"stall_id": catalog["laksa_stall"], "rating": "5", "comment": "Great"})
        assert dashboard.admin_stats() == {"users": 2, "hawker_centers": 1, "stalls": 2, "reviews": 1}
