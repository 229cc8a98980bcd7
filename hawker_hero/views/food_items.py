from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..auth import admin_required
from ..errors import ValidationError
from ..forms import flash_errors, recall_form, remember_form
from ..listing import parse_page
from ..services import food_items, stalls

bp = Blueprint("food_items", __name__, url_prefix="/food-items")


@bp.route("")
def index():
    filters = {
        "name": request.args.get("name", "").strip(),
        "min_price": request.args.get("min_price", "").strip(),
        "max_price": request.args.get("max_price", "").strip(),
        "stall": request.args.get("stall", "").strip(),
    }
    page = food_items.list_food_items(page=parse_page(request.args.get("page")), **filters)
    return render_template("food_items/list.html", page=page, filters=filters, stalls=stalls.stall_options())


@bp.route("/new")
@admin_required
def new():
    return render_template(
        "food_items/form.html", item=None, form_data=recall_form("food_item"), stalls=stalls.stall_options()
    )


@bp.route("", methods=["POST"])
@admin_required
def create():
    try:
        food_items.create_food_item(request.form, request.files.get("image"))
    except ValidationError as exc:
        flash_errors(exc)
        remember_form("food_item", request.form)
        return redirect(url_for("food_items.new"))
    flash("Food item added successfully!", "success")
    return redirect(url_for("food_items.index"))


@bp.route("/<int:food_id>")
def show(food_id):
    return render_template("food_items/detail.html", item=food_items.get_food_item(food_id))


@bp.route("/<int:food_id>/edit")
@admin_required
def edit(food_id):
    item = food_items.get_food_item(food_id)
    return render_template(
        "food_items/form.html", item=item, form_data=recall_form("food_item"), stalls=stalls.stall_options()
    )


@bp.route("/<int:food_id>", methods=["PUT", "POST"])
@admin_required
def update(food_id):
    try:
        food_items.update_food_item(food_id, request.form, request.files.get("image"))
    except ValidationError as exc:
        flash_errors(exc)
        remember_form("food_item", request.form)
        return redirect(url_for("food_items.edit", food_id=food_id), code=303)
    flash("Food item updated successfully!", "success")
    return redirect(url_for("food_items.index"), code=303)


@bp.route("/<int:food_id>", methods=["DELETE"])
@bp.route("/<int:food_id>/delete", methods=["POST"])
@admin_required
def delete(food_id):
    food_items.delete_food_item(food_id)
    flash("Food item deleted successfully!", "success")
    return redirect(url_for("food_items.index"), code=303)
