import logging

from ..errors import DataAccessFailure, ValidationError
from ..forms import optional_decimal, optional_int
from ..listing import contains, paginate
from ..models import FoodItem, Stall, db
from ..uploads import discard_image, save_image
from . import commit, get_or_404

logger = logging.getLogger(__name__)

PAGE_SIZE = 12


def list_food_items(name=None, min_price=None, max_price=None, stall=None, page=1, per_page=PAGE_SIZE):
    query = FoodItem.query.join(Stall, FoodItem.stall_id == Stall.id)
    if name:
        query = query.filter(contains(FoodItem.name, name))
    low = optional_decimal(min_price)
    if low is not None:
        query = query.filter(FoodItem.price >= low)
    high = optional_decimal(max_price)
    if high is not None:
        query = query.filter(FoodItem.price <= high)
    stall_id = optional_int(stall)
    if stall_id is not None:
        query = query.filter(FoodItem.stall_id == stall_id)
    return paginate(query.order_by(FoodItem.name.asc(), FoodItem.id.asc()), page, per_page)


def food_options():
    return FoodItem.query.order_by(FoodItem.name.asc()).all()


def get_food_item(food_id):
    return get_or_404(FoodItem, food_id)


def _clean(form):
    values = {
        "name": (form.get("name") or "").strip(),
        "description": (form.get("description") or "").strip() or None,
    }
    errors = {}
    if not values["name"]:
        errors["name"] = "Name is required."

    raw_price = (form.get("price") or "").strip()
    price = optional_decimal(raw_price)
    if not raw_price:
        errors["price"] = "Price is required."
    elif price is None or price < 0:
        errors["price"] = "Price must be a number of zero or more."
    values["price"] = price

    stall_id = optional_int(form.get("stall_id"))
    if stall_id is None:
        errors["stall_id"] = "Stall is required."
    elif db.session.get(Stall, stall_id) is None:
        errors["stall_id"] = "Please choose an existing stall."
    values["stall_id"] = stall_id

    if errors:
        raise ValidationError(errors, "Name, Price, and Stall are required for a food item.")
    return values


def create_food_item(form, image=None):
    values = _clean(form)
    item = FoodItem(**values)
    item.image = save_image(image, "food")
    db.session.add(item)
    try:
        commit("creating a food item")
    except DataAccessFailure:
        discard_image(item.image)
        raise
    logger.info("Food item %s created", item.id)
    return item


def update_food_item(food_id, form, image=None):
    item = get_food_item(food_id)
    values = _clean(form)
    new_image = save_image(image, "food")
    for key, value in values.items():
        setattr(item, key, value)
    if new_image:
        item.image = new_image
    try:
        commit("updating a food item")
    except DataAccessFailure:
        discard_image(new_image)
        raise
    return item


def delete_food_item(food_id):
    item = get_food_item(food_id)
    db.session.delete(item)
    commit("deleting a food item")
    logger.info("Food item %s deleted", food_id)
