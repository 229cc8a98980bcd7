from flask import Blueprint, flash, g, redirect, render_template, request, url_for

from ..auth import login_required
from ..errors import ValidationError
from ..forms import safe_target
from ..listing import parse_page
from ..services import favorites, food_items, stalls

bp = Blueprint("favorites", __name__, url_prefix="/favorites")


@bp.route("")
@login_required
def index():
    search = request.args.get("search", "").strip()
    page = favorites.list_favorites(
        g.user,
        search=search,
        view=request.args.get("view"),
        user=request.args.get("user"),
        page=parse_page(request.args.get("page")),
    )
    target_user = page.extras["target_user"]
    if not g.user.is_admin:
        title = "My Favorites"
    elif target_user is not None:
        title = f"Favorites for User #{target_user}"
    else:
        title = "All Favorites"
    return render_template(
        "favorites/list.html",
        page=page,
        title=title,
        search=search,
        users=favorites.users_with_favorites() if g.user.is_admin else [],
    )


@bp.route("/add", methods=["GET", "POST"])
@login_required
def add():
    if request.method == "POST":
        redirect_path = safe_target(request.form.get("redirect_to"), url_for("stalls.index"))
        try:
            _, created = favorites.add_favorite(
                g.user,
                stall_id=request.form.get("stall_id"),
                food_id=request.form.get("food_id"),
                notes=request.form.get("notes"),
            )
        except ValidationError as exc:
            flash(exc.message, "error")
            return redirect(redirect_path)
        if created:
            flash("Successfully added to favorites!", "success")
        else:
            flash("This item is already in your favorites", "info")
        return redirect(redirect_path)
    return render_template(
        "favorites/add.html",
        stalls=stalls.stall_options(),
        food_items=food_items.food_options(),
        stall_id=request.args.get("stall_id", ""),
        food_id=request.args.get("food_id", ""),
    )


@bp.route("/edit/<int:favorite_id>", methods=["GET", "POST"])
@login_required
def edit(favorite_id):
    if request.method == "POST":
        return update(favorite_id)
    favorite = favorites.get_favorite(g.user, favorite_id)
    return render_template("favorites/edit.html", favorite=favorite)


@bp.route("/update/<int:favorite_id>", methods=["POST"])
@login_required
def update(favorite_id):
    redirect_path = safe_target(request.form.get("redirect_to"), url_for("favorites.index"))
    favorites.update_favorite(g.user, favorite_id, request.form)
    flash("Favorite updated successfully!", "success")
    return redirect(redirect_path)


@bp.route("/delete/<int:favorite_id>", methods=["POST"])
@login_required
def delete(favorite_id):
    redirect_path = safe_target(request.form.get("redirect_to"), url_for("favorites.index"))
    favorites.delete_favorite(g.user, favorite_id)
    flash("Favorite removed successfully", "success")
    return redirect(redirect_path)


@bp.route("/others")
@login_required
def others():
    page = favorites.community_favorites(g.user, page=parse_page(request.args.get("page")))
    return render_template("favorites/others.html", page=page)
