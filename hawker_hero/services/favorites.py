import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from ..auth import require_owner_or_admin
from ..errors import ValidationError
from ..forms import optional_int
from ..listing import contains, paginate
from ..models import Favorite, FoodItem, Stall, User, db, utcnow
from . import commit, get_or_404

logger = logging.getLogger(__name__)

PAGE_SIZE = 9


def list_favorites(actor, search=None, view=None, user=None, page=1, per_page=PAGE_SIZE):
    """Favorites visible to ``actor``.

    Non-admins only ever see their own rows whatever ``view``/``user`` say;
    admins see everything or one user's rows when ``user`` is given.
    """
    query = (
        Favorite.query.join(User, Favorite.user_id == User.id)
        .outerjoin(Stall, Favorite.stall_id == Stall.id)
        .outerjoin(FoodItem, Favorite.food_id == FoodItem.id)
    )

    target_user = optional_int(user) if actor.is_admin else None
    if not actor.is_admin:
        query = query.filter(Favorite.user_id == actor.id)
    elif target_user is not None:
        query = query.filter(Favorite.user_id == target_user)

    if search:
        query = query.filter(
            or_(
                contains(Stall.name, search),
                contains(FoodItem.name, search),
                contains(User.username, search),
                contains(Favorite.notes, search),
            )
        )

    result = paginate(query.order_by(Favorite.created_at.desc(), Favorite.id.desc()), page, per_page)
    result.extras["target_user"] = target_user
    result.extras["show_all"] = actor.is_admin and target_user is None
    return result


def users_with_favorites():
    return (
        db.session.query(User.id, User.username)
        .join(Favorite, Favorite.user_id == User.id)
        .distinct()
        .order_by(User.username.asc())
        .all()
    )


def get_favorite(actor, favorite_id):
    favorite = get_or_404(Favorite, favorite_id)
    require_owner_or_admin(actor, favorite.user_id)
    return favorite


def add_favorite(actor, stall_id=None, food_id=None, notes=None):
    """Bookmark a stall and/or a food item.

    Returns ``(favorite, created)``. A repeat of an existing bookmark is not
    an error: the stored row comes back with ``created`` False.
    """
    stall_id = optional_int(stall_id)
    food_id = optional_int(food_id)
    if stall_id is None and food_id is None:
        raise ValidationError({"target": "Please select either a stall or a food item to favorite"})
    if stall_id is not None and db.session.get(Stall, stall_id) is None:
        raise ValidationError({"stall_id": "Please choose an existing stall."})
    if food_id is not None and db.session.get(FoodItem, food_id) is None:
        raise ValidationError({"food_id": "Please choose an existing food item."})

    existing = _find_existing(actor.id, stall_id, food_id)
    if existing is not None:
        return existing, False

    notes = (notes or "").strip() or None
    favorite = Favorite(user_id=actor.id, stall_id=stall_id, food_id=food_id, notes=notes)
    db.session.add(favorite)
    try:
        db.session.flush()
    except IntegrityError:
        # a concurrent request stored the same bookmark first
        db.session.rollback()
        existing = _find_existing(actor.id, stall_id, food_id)
        if existing is None:
            raise
        return existing, False
    commit("adding a favorite")
    logger.info("User %s added favorite %s", actor.id, favorite.id)
    return favorite, True


def _find_existing(user_id, stall_id, food_id):
    matches = []
    if stall_id is not None:
        matches.append(Favorite.stall_id == stall_id)
    if food_id is not None:
        matches.append(Favorite.food_id == food_id)
    return Favorite.query.filter(Favorite.user_id == user_id, or_(*matches)).first()


def update_favorite(actor, favorite_id, form):
    favorite = get_favorite(actor, favorite_id)
    if "notes" in form:
        favorite.notes = (form.get("notes") or "").strip() or None
    favorite.updated_at = utcnow()
    commit("updating a favorite")
    return favorite


def delete_favorite(actor, favorite_id):
    favorite = get_favorite(actor, favorite_id)
    db.session.delete(favorite)
    commit("deleting a favorite")
    logger.info(
        "Favorite %s deleted by user %s (%s)", favorite_id, actor.id, "admin" if actor.is_admin else "owner"
    )


def community_favorites(actor, page=1, per_page=PAGE_SIZE):
    """What other users bookmark, as ``(stall, food, fans)`` rows.

    Only counts are exposed; notes and user identities stay private.
    """
    fans = func.count(func.distinct(Favorite.user_id)).label("fans")
    query = (
        db.session.query(Stall, FoodItem, fans)
        .select_from(Favorite)
        .outerjoin(Stall, Favorite.stall_id == Stall.id)
        .outerjoin(FoodItem, Favorite.food_id == FoodItem.id)
        .filter(Favorite.user_id != actor.id)
        .group_by(Favorite.stall_id, Favorite.food_id, Stall.id, FoodItem.id)
        .order_by(fans.desc(), Favorite.stall_id.asc(), Favorite.food_id.asc())
    )
    return paginate(query, page, per_page)
