from flask import Blueprint, flash, g, redirect, render_template, request, url_for

from ..auth import login_required
from ..errors import ValidationError
from ..forms import flash_errors, recall_form, remember_form
from ..listing import parse_page
from ..services import comments, reviews, stalls

bp = Blueprint("reviews", __name__)


@bp.route("/reviews", endpoint="index")
def list_reviews():
    filters = {
        key: request.args.get(key, "").strip()
        for key in ("rating", "stall", "sort", "search", "min_price", "max_price")
    }
    page = reviews.list_reviews(page=parse_page(request.args.get("page")), **filters)
    return render_template(
        "reviews/list.html",
        page=page,
        filters=filters,
        stall_names=reviews.stall_names(),
        average_rating=page.extras["average_rating"],
        comments_by_review=page.extras["comments_by_review"],
    )


@bp.route("/addReviews", methods=["GET", "POST"])
@login_required
def add_review():
    if request.method == "POST":
        try:
            reviews.create_review(g.user, request.form)
        except ValidationError as exc:
            flash_errors(exc)
            remember_form("review", request.form)
            return redirect(url_for("reviews.add_review"))
        flash("Review submitted successfully!", "success")
        return redirect(url_for("reviews.index"))
    return render_template(
        "reviews/form.html", review=None, form_data=recall_form("review"), stalls=stalls.stall_options()
    )


@bp.route("/editReviews/<int:review_id>", methods=["GET", "POST"])
@login_required
def edit_review(review_id):
    if request.method == "POST":
        try:
            reviews.update_review(g.user, review_id, request.form)
        except ValidationError as exc:
            flash_errors(exc)
            remember_form("review", request.form)
            return redirect(url_for("reviews.edit_review", review_id=review_id))
        flash("Review updated successfully!", "success")
        return redirect(url_for("reviews.index"))
    review = reviews.edit_review(g.user, review_id)
    form_data = recall_form("review") or {
        "stall_id": str(review.stall_id),
        "rating": str(review.rating),
        "comment": review.comment,
    }
    return render_template("reviews/form.html", review=review, form_data=form_data, stalls=stalls.stall_options())


@bp.route("/reviews/delete/<int:review_id>")
@login_required
def delete_review(review_id):
    reviews.delete_review(g.user, review_id)
    flash("Review deleted successfully.", "success")
    return redirect(url_for("reviews.index"))


# --------------------
# Comments
# --------------------
@bp.route("/reviews/<int:review_id>/comments", methods=["POST"])
@login_required
def add_comment(review_id):
    try:
        comments.add_comment(g.user, review_id, request.form.get("comment"))
    except ValidationError as exc:
        flash(exc.message, "error")
    else:
        flash("Comment posted.", "success")
    return redirect(url_for("reviews.index"))


@bp.route("/comments/edit/<int:comment_id>", methods=["GET", "POST"])
@login_required
def edit_comment(comment_id):
    if request.method == "POST":
        try:
            comments.update_comment(g.user, comment_id, request.form.get("comment"))
        except ValidationError as exc:
            flash(exc.message, "error")
            return redirect(url_for("reviews.edit_comment", comment_id=comment_id))
        flash("Comment updated successfully", "success")
        return redirect(url_for("reviews.index"))
    comment = comments.edit_comment(g.user, comment_id)
    return render_template("reviews/edit_comment.html", comment=comment)


@bp.route("/comments/delete/<int:comment_id>")
@login_required
def delete_comment(comment_id):
    comments.delete_comment(g.user, comment_id)
    flash("Comment deleted", "success")
    return redirect(url_for("reviews.index"))
