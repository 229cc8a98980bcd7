from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..auth import admin_required
from ..errors import ValidationError
from ..forms import flash_errors, recall_form, remember_form
from ..listing import parse_page
from ..services import hawker_centers, stalls

bp = Blueprint("stalls", __name__, url_prefix="/stalls")


@bp.route("")
def index():
    filters = {
        "search": request.args.get("search", "").strip(),
        "cuisine": request.args.get("cuisine", "").strip(),
        "location": request.args.get("location", "").strip(),
        "center": request.args.get("center", "").strip(),
    }
    page = stalls.list_stalls(page=parse_page(request.args.get("page")), **filters)
    return render_template(
        "stalls/list.html",
        page=page,
        filters=filters,
        cuisines=stalls.cuisine_options(),
        centers=hawker_centers.center_options(),
    )


@bp.route("/new")
@admin_required
def new():
    return render_template(
        "stalls/form.html",
        stall=None,
        form_data=recall_form("stall"),
        centers=hawker_centers.center_options(),
    )


@bp.route("", methods=["POST"])
@admin_required
def create():
    try:
        stalls.create_stall(request.form, request.files.get("image"))
    except ValidationError as exc:
        flash_errors(exc)
        remember_form("stall", request.form)
        return redirect(url_for("stalls.new"))
    flash("Stall added successfully!", "success")
    return redirect(url_for("stalls.index"))


@bp.route("/<int:stall_id>")
def show(stall_id):
    return render_template("stalls/detail.html", **stalls.stall_detail(stall_id))


@bp.route("/<int:stall_id>/edit")
@admin_required
def edit(stall_id):
    stall = stalls.get_stall(stall_id)
    return render_template(
        "stalls/form.html",
        stall=stall,
        form_data=recall_form("stall", default={}),
        centers=hawker_centers.center_options(),
    )


@bp.route("/<int:stall_id>", methods=["PUT", "POST"])
@admin_required
def update(stall_id):
    try:
        stalls.update_stall(stall_id, request.form, request.files.get("image"))
    except ValidationError as exc:
        flash_errors(exc)
        remember_form("stall", request.form)
        return redirect(url_for("stalls.edit", stall_id=stall_id), code=303)
    flash("Stall updated successfully!", "success")
    return redirect(url_for("stalls.index"), code=303)


@bp.route("/<int:stall_id>", methods=["DELETE"])
@bp.route("/<int:stall_id>/delete", methods=["POST"])
@admin_required
def delete(stall_id):
    stalls.delete_stall(stall_id)
    flash("Stall deleted successfully.", "success")
    return redirect(url_for("stalls.index"), code=303)
