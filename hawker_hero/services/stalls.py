import logging

from sqlalchemy import func

from ..errors import DataAccessFailure, ValidationError
from ..forms import optional_int
from ..listing import contains, paginate
from ..models import FoodItem, HawkerCenter, Review, Stall, db
from ..uploads import discard_image, save_image
from . import commit, get_or_404

logger = logging.getLogger(__name__)

PAGE_SIZE = 12
REQUIRED_MESSAGE = "All fields (name, location, cuisine) are required"


def list_stalls(search=None, cuisine=None, location=None, center=None, page=1, per_page=PAGE_SIZE):
    query = Stall.query
    if search:
        query = query.filter(contains(Stall.name, search))
    if cuisine:
        query = query.filter(Stall.cuisine == cuisine)
    if location:
        query = query.filter(contains(Stall.location, location))
    center_id = optional_int(center)
    if center_id is not None:
        query = query.filter(Stall.center_id == center_id)
    return paginate(query.order_by(Stall.name.asc(), Stall.id.asc()), page, per_page)


def cuisine_options():
    rows = db.session.query(Stall.cuisine).distinct().order_by(Stall.cuisine.asc()).all()
    return [cuisine for (cuisine,) in rows]


def stall_options():
    return Stall.query.order_by(Stall.name.asc()).all()


def get_stall(stall_id):
    return get_or_404(Stall, stall_id)


def stall_detail(stall_id):
    stall = get_stall(stall_id)
    food_items = FoodItem.query.filter_by(stall_id=stall.id).order_by(FoodItem.name.asc()).all()
    reviews = Review.query.filter_by(stall_id=stall.id).order_by(Review.created_at.desc(), Review.id.desc()).all()
    average = db.session.query(func.avg(Review.rating)).filter(Review.stall_id == stall.id).scalar()
    return {
        "stall": stall,
        "food_items": food_items,
        "reviews": reviews,
        "average_rating": float(average or 0),
    }


def _clean(form):
    values = {
        "name": (form.get("name") or "").strip(),
        "location": (form.get("location") or "").strip(),
        "cuisine": (form.get("cuisine") or "").strip(),
    }
    missing = {key: f"{key.capitalize()} is required." for key, value in values.items() if not value}
    center_raw = (form.get("center_id") or "").strip()
    center_id = None
    if center_raw:
        center_id = optional_int(center_raw)
        if center_id is None or db.session.get(HawkerCenter, center_id) is None:
            missing["center_id"] = "Please choose an existing hawker center."
    if missing:
        message = REQUIRED_MESSAGE if any(key != "center_id" for key in missing) else None
        raise ValidationError(missing, message)
    values["center_id"] = center_id
    return values


def create_stall(form, image=None):
    values = _clean(form)
    stall = Stall(**values)
    stall.image = save_image(image, "stalls")
    db.session.add(stall)
    try:
        commit("creating a stall")
    except DataAccessFailure:
        discard_image(stall.image)
        raise
    logger.info("Stall %s created", stall.id)
    return stall


def update_stall(stall_id, form, image=None):
    stall = get_stall(stall_id)
    values = _clean(form)
    new_image = save_image(image, "stalls")
    for key, value in values.items():
        setattr(stall, key, value)
    if new_image:
        stall.image = new_image
    try:
        commit("updating a stall")
    except DataAccessFailure:
        discard_image(new_image)
        raise
    return stall


def delete_stall(stall_id):
    stall = get_stall(stall_id)
    db.session.delete(stall)
    commit("deleting a stall")
    logger.info("Stall %s deleted", stall_id)
