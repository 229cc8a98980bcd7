import logging
from collections import defaultdict

from sqlalchemy import func, select

from ..auth import require_owner_or_admin
from ..errors import ValidationError
from ..forms import optional_decimal, optional_int
from ..listing import contains, paginate, pick_order
from ..models import Comment, FoodItem, Review, Stall, User, db
from . import commit, get_or_404

logger = logging.getLogger(__name__)

PAGE_SIZE = 10

SORT_ORDERS = {
    "recent": (Review.created_at.desc(), Review.id.desc()),
    "oldest": (Review.created_at.asc(), Review.id.asc()),
    "highest": (Review.rating.desc(), Review.created_at.desc(), Review.id.desc()),
    "lowest": (Review.rating.asc(), Review.created_at.desc(), Review.id.desc()),
}


def list_reviews(rating=None, stall=None, search=None, min_price=None, max_price=None, sort=None,
                 page=1, per_page=PAGE_SIZE):
    """Filtered reviews plus the average rating and comments of the page."""
    query = Review.query.join(Stall, Review.stall_id == Stall.id).join(User, Review.user_id == User.id)

    rating_value = optional_int(rating)
    if rating_value is not None:
        query = query.filter(Review.rating == rating_value)
    if stall:
        query = query.filter(Stall.name == stall)
    if search:
        query = query.filter(contains(Stall.name, search))

    low = optional_decimal(min_price)
    high = optional_decimal(max_price)
    if low is not None or high is not None:
        priced = select(FoodItem.id).where(FoodItem.stall_id == Stall.id)
        if low is not None:
            priced = priced.where(FoodItem.price >= low)
        if high is not None:
            priced = priced.where(FoodItem.price <= high)
        query = query.filter(priced.exists())

    average = query.with_entities(func.avg(Review.rating)).scalar()
    result = paginate(query.order_by(*pick_order(SORT_ORDERS, sort, "recent")), page, per_page)

    comments_by_review = defaultdict(list)
    review_ids = [review.id for review in result.rows]
    if review_ids:
        comments = (
            Comment.query.filter(Comment.review_id.in_(review_ids))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )
        for comment in comments:
            comments_by_review[comment.review_id].append(comment)

    result.extras["average_rating"] = float(average or 0)
    result.extras["comments_by_review"] = dict(comments_by_review)
    return result


def stall_names():
    rows = db.session.query(Stall.name).distinct().order_by(Stall.name.asc()).all()
    return [name for (name,) in rows]


def get_review(review_id):
    return get_or_404(Review, review_id)


def _validate_stall(raw, errors):
    stall_id = optional_int(raw)
    if stall_id is None or db.session.get(Stall, stall_id) is None:
        errors["stall"] = "Please select a stall."
    return stall_id


def _validate_rating(raw, errors):
    rating = optional_int(raw)
    if rating is None or not 1 <= rating <= 5:
        errors["rating"] = "Rating must be between 1 and 5."
    return rating


def _validate_comment(raw, errors):
    text = (raw or "").strip()
    if not text:
        errors["comment"] = "Comment cannot be empty."
    return text


def create_review(actor, form):
    errors = {}
    stall_id = _validate_stall(form.get("stall_id"), errors)
    rating = _validate_rating(form.get("rating"), errors)
    text = _validate_comment(form.get("comment"), errors)
    if errors:
        raise ValidationError(errors)

    review = Review(user_id=actor.id, stall_id=stall_id, rating=rating, comment=text)
    db.session.add(review)
    commit("creating a review")
    logger.info("User %s reviewed stall %s", actor.id, stall_id)
    return review


def edit_review(actor, review_id):
    """Load a review for its edit form; same gate as the update."""
    review = get_review(review_id)
    require_owner_or_admin(actor, review.user_id)
    return review


def update_review(actor, review_id, form):
    """Apply the fields present in ``form``; missing fields keep their values."""
    review = edit_review(actor, review_id)

    errors = {}
    patch = {}
    if "stall_id" in form:
        patch["stall_id"] = _validate_stall(form.get("stall_id"), errors)
    if "rating" in form:
        patch["rating"] = _validate_rating(form.get("rating"), errors)
    if "comment" in form:
        patch["comment"] = _validate_comment(form.get("comment"), errors)
    if errors:
        raise ValidationError(errors)

    for key, value in patch.items():
        setattr(review, key, value)
    commit("updating a review")
    return review


def delete_review(actor, review_id):
    review = edit_review(actor, review_id)
    db.session.delete(review)
    commit("deleting a review")
    logger.info("Review %s deleted by user %s", review_id, actor.id)
