from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..auth import admin_required
from ..errors import ValidationError
from ..forms import flash_errors, recall_form, remember_form
from ..listing import parse_page
from ..services import hawker_centers

bp = Blueprint("hawker_centers", __name__, url_prefix="/hawker-centers")


@bp.route("")
def index():
    filters = {
        "search": request.args.get("search", "").strip(),
        "facilities": request.args.get("facilities", "").strip(),
    }
    page = hawker_centers.list_centers(page=parse_page(request.args.get("page")), **filters)
    return render_template("hawker_centers/list.html", page=page, filters=filters)


@bp.route("/new")
@admin_required
def new():
    return render_template("hawker_centers/form.html", center=None, form_data=recall_form("center"))


@bp.route("", methods=["POST"])
@admin_required
def create():
    try:
        hawker_centers.create_center(request.form, request.files.get("image"))
    except ValidationError as exc:
        flash_errors(exc)
        remember_form("center", request.form)
        return redirect(url_for("hawker_centers.new"))
    flash("Hawker center added successfully!", "success")
    return redirect(url_for("hawker_centers.index"))


@bp.route("/<int:center_id>")
def show(center_id):
    return render_template("hawker_centers/detail.html", **hawker_centers.center_detail(center_id))


@bp.route("/<int:center_id>/edit")
@admin_required
def edit(center_id):
    center = hawker_centers.get_center(center_id)
    return render_template("hawker_centers/form.html", center=center, form_data=recall_form("center"))


@bp.route("/<int:center_id>", methods=["PUT", "POST"])
@admin_required
def update(center_id):
    try:
        hawker_centers.update_center(center_id, request.form, request.files.get("image"))
    except ValidationError as exc:
        flash_errors(exc)
        remember_form("center", request.form)
        return redirect(url_for("hawker_centers.edit", center_id=center_id), code=303)
    flash("Hawker center updated successfully!", "success")
    return redirect(url_for("hawker_centers.index"), code=303)


@bp.route("/<int:center_id>", methods=["DELETE"])
@bp.route("/<int:center_id>/delete", methods=["POST"])
@admin_required
def delete(center_id):
    try:
        hawker_centers.delete_center(center_id)
    except ValidationError as exc:
        flash(exc.message, "error")
        return redirect(url_for("hawker_centers.index"), code=303)
    flash("Hawker center deleted successfully!", "success")
    return redirect(url_for("hawker_centers.index"), code=303)
