from flask import Blueprint, flash, g, redirect, render_template, request, url_for

from ..auth import admin_required, login_required, sign_in, sign_out
from ..errors import Conflict, InvalidCredentials, ValidationError
from ..forms import flash_errors, recall_form, remember_form, safe_target
from ..services import accounts, dashboard

bp = Blueprint("main", __name__)


@bp.route("/")
def index():
    return render_template("index.html")


# --------------------
# Accounts
# --------------------
@bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        try:
            # the public form never chooses a role
            accounts.register(
                request.form.get("username"),
                request.form.get("email"),
                request.form.get("password"),
            )
        except (ValidationError, Conflict) as exc:
            if isinstance(exc, ValidationError):
                flash_errors(exc)
            else:
                flash(exc.message, "error")
            remember_form("register", request.form)
            return redirect(url_for("main.register"))
        flash("Registration successful! Please log in.", "success")
        return redirect(url_for("main.login"))
    return render_template("auth/register.html", form_data=recall_form("register"))


@bp.route("/login", methods=["GET", "POST"])
def login():
    next_url = request.values.get("next")
    if request.method == "POST":
        try:
            identity = accounts.authenticate(request.form.get("email"), request.form.get("password"))
        except (ValidationError, InvalidCredentials) as exc:
            flash(exc.message, "error")
            return redirect(url_for("main.login", next=next_url))
        sign_in(identity)
        flash("Login successful!", "success")
        return redirect(safe_target(next_url, url_for("main.dashboard")))
    return render_template("auth/login.html", next_url=next_url)


@bp.route("/logout")
def logout():
    sign_out()
    return redirect(url_for("main.index"))


# --------------------
# Dashboards
# --------------------
@bp.route("/dashboard", endpoint="dashboard")
@login_required
def dashboard_view():
    return render_template("dashboard.html", **dashboard.user_dashboard(g.user))


@bp.route("/admin")
@admin_required
def admin():
    return render_template("admin/dashboard.html", stats=dashboard.admin_stats())
