import logging

from sqlalchemy import or_

from ..errors import ValidationError
from ..forms import optional_int
from ..listing import contains, paginate
from ..models import FoodItem, Recommendation, Stall, User, db
from . import commit, get_or_404

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


def list_recommendations(search=None, stall=None, user=None, page=1, per_page=PAGE_SIZE):
    query = (
        Recommendation.query.join(User, Recommendation.user_id == User.id)
        .join(Stall, Recommendation.stall_id == Stall.id)
    )
    if search:
        query = query.filter(
            or_(contains(Recommendation.tip, search), contains(Stall.name, search), contains(User.username, search))
        )
    stall_id = optional_int(stall)
    if stall_id is not None:
        query = query.filter(Recommendation.stall_id == stall_id)
    user_id = optional_int(user)
    if user_id is not None:
        query = query.filter(Recommendation.user_id == user_id)
    return paginate(query.order_by(Recommendation.created_at.desc(), Recommendation.id.desc()), page, per_page)


def recommendation_authors():
    return (
        db.session.query(User.id, User.username)
        .join(Recommendation, Recommendation.user_id == User.id)
        .distinct()
        .order_by(User.username.asc())
        .all()
    )


def get_recommendation(recommendation_id):
    return get_or_404(Recommendation, recommendation_id)


def _clean(form):
    errors = {}
    stall_id = optional_int(form.get("stall_id"))
    if stall_id is None:
        errors["stall_id"] = "Stall is required."
    elif db.session.get(Stall, stall_id) is None:
        errors["stall_id"] = "Please choose an existing stall."

    food_id = None
    raw_food = (form.get("food_id") or "").strip()
    if raw_food:
        food_id = optional_int(raw_food)
        if food_id is None or db.session.get(FoodItem, food_id) is None:
            errors["food_id"] = "Please choose an existing food item."

    tip = (form.get("tip") or "").strip()
    if not tip:
        errors["tip"] = "Tip is required."
    if errors:
        raise ValidationError(errors, "Stall and Tip are required for a recommendation.")
    return {"stall_id": stall_id, "food_id": food_id, "tip": tip}


def create_recommendation(actor, form):
    recommendation = Recommendation(user_id=actor.id, **_clean(form))
    db.session.add(recommendation)
    commit("adding a recommendation")
    logger.info("Recommendation %s added by user %s", recommendation.id, actor.id)
    return recommendation


def update_recommendation(recommendation_id, form):
    recommendation = get_recommendation(recommendation_id)
    for key, value in _clean(form).items():
        setattr(recommendation, key, value)
    commit("updating a recommendation")
    return recommendation


def delete_recommendation(recommendation_id):
    recommendation = get_recommendation(recommendation_id)
    db.session.delete(recommendation)
    commit("deleting a recommendation")
    logger.info("Recommendation %s deleted", recommendation_id)
