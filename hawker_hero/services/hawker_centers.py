import logging

from sqlalchemy import func, or_

from ..errors import DataAccessFailure, ValidationError
from ..listing import contains, paginate
from ..models import HawkerCenter, Stall, db
from ..uploads import discard_image, save_image
from . import commit, get_or_404

logger = logging.getLogger(__name__)

PAGE_SIZE = 12


def list_centers(search=None, facilities=None, page=1, per_page=PAGE_SIZE):
    """Centers ordered by name; each row is ``(center, stall_count)``."""
    stall_count = func.count(Stall.id).label("stall_count")
    query = db.session.query(HawkerCenter, stall_count).outerjoin(Stall, Stall.center_id == HawkerCenter.id)
    if search:
        query = query.filter(or_(contains(HawkerCenter.name, search), contains(HawkerCenter.address, search)))
    if facilities:
        query = query.filter(contains(HawkerCenter.facilities, facilities))
    query = query.group_by(HawkerCenter.id).order_by(HawkerCenter.name.asc(), HawkerCenter.id.asc())
    return paginate(query, page, per_page)


def center_options():
    return HawkerCenter.query.order_by(HawkerCenter.name.asc()).all()


def get_center(center_id):
    return get_or_404(HawkerCenter, center_id)


def center_detail(center_id):
    center = get_center(center_id)
    stalls = Stall.query.filter_by(center_id=center.id).order_by(Stall.name.asc()).all()
    return {"center": center, "stalls": stalls}


def _clean(form):
    values = {
        "name": (form.get("name") or "").strip(),
        "address": (form.get("address") or "").strip(),
        "facilities": (form.get("facilities") or "").strip() or None,
    }
    errors = {}
    if not values["name"]:
        errors["name"] = "Name is required."
    if not values["address"]:
        errors["address"] = "Address is required."
    if errors:
        raise ValidationError(errors, "Name and Address are required for a hawker center.")
    return values


def create_center(form, image=None):
    values = _clean(form)
    center = HawkerCenter(**values)
    center.image_url = save_image(image, "centers")
    db.session.add(center)
    try:
        commit("creating a hawker center")
    except DataAccessFailure:
        discard_image(center.image_url)
        raise
    logger.info("Hawker center %s created", center.id)
    return center


def update_center(center_id, form, image=None):
    center = get_center(center_id)
    values = _clean(form)
    new_image = save_image(image, "centers")
    for key, value in values.items():
        setattr(center, key, value)
    if new_image:
        center.image_url = new_image
    try:
        commit("updating a hawker center")
    except DataAccessFailure:
        discard_image(new_image)
        raise
    return center


def delete_center(center_id):
    center = get_center(center_id)
    if Stall.query.filter_by(center_id=center.id).count() > 0:
        raise ValidationError(
            {"form": "Cannot delete hawker center. Please remove all associated stalls first."}
        )
    db.session.delete(center)
    commit("deleting a hawker center")
    logger.info("Hawker center %s deleted", center_id)
