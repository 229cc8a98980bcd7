from flask import Blueprint, flash, g, redirect, render_template, request, url_for

from ..auth import admin_required
from ..errors import ValidationError
from ..forms import flash_errors, recall_form, remember_form
from ..listing import parse_page
from ..services import food_items, recommendations, stalls

bp = Blueprint("recommendations", __name__, url_prefix="/recommendations")


@bp.route("")
def index():
    filters = {
        "search": request.args.get("search", "").strip(),
        "stall": request.args.get("stall", "").strip(),
        "user": request.args.get("user", "").strip(),
    }
    page = recommendations.list_recommendations(page=parse_page(request.args.get("page")), **filters)
    return render_template(
        "recommendations/list.html",
        page=page,
        filters=filters,
        stalls=stalls.stall_options(),
        food_items=food_items.food_options(),
        authors=recommendations.recommendation_authors(),
        form_data=recall_form("recommendation"),
    )


@bp.route("/add", methods=["POST"])
@admin_required
def add():
    try:
        recommendations.create_recommendation(g.user, request.form)
    except ValidationError as exc:
        flash_errors(exc)
        remember_form("recommendation", request.form)
        return redirect(url_for("recommendations.index"))
    flash("Recommendation added successfully!", "success")
    return redirect(url_for("recommendations.index"))


@bp.route("/edit/<int:recommendation_id>", methods=["GET", "POST"])
@admin_required
def edit(recommendation_id):
    if request.method == "POST":
        try:
            recommendations.update_recommendation(recommendation_id, request.form)
        except ValidationError as exc:
            flash_errors(exc)
            return redirect(url_for("recommendations.edit", recommendation_id=recommendation_id))
        flash(f"Recommendation ID {recommendation_id} updated successfully!", "success")
        return redirect(url_for("recommendations.index"))
    return render_template(
        "recommendations/edit.html",
        recommendation=recommendations.get_recommendation(recommendation_id),
        stalls=stalls.stall_options(),
        food_items=food_items.food_options(),
    )


@bp.route("/delete/<int:recommendation_id>", methods=["POST"])
@admin_required
def delete(recommendation_id):
    recommendations.delete_recommendation(recommendation_id)
    flash(f"Recommendation ID {recommendation_id} deleted successfully!", "success")
    return redirect(url_for("recommendations.index"))
