import logging
import os

import click
from flask import Flask, flash, g, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from .auth import load_identity
from .config import DEFAULT_SECRET_KEY, Config
from .errors import UNAVAILABLE, DataAccessFailure, HawkerHeroError, NotAuthenticated, NotAuthorized, NotFound
from .models import Role, db
from .sessions import DatabaseSessionInterface, purge_expired_sessions

logger = logging.getLogger(__name__)


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_object is not None:
        if isinstance(config_object, dict):
            app.config.update(config_object)
        else:
            app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if app.config["SECRET_KEY"] == DEFAULT_SECRET_KEY and not app.testing:
        logger.warning("SECRET_KEY is not set; sessions are signed with a public default")

    db.init_app(app)
    app.session_interface = DatabaseSessionInterface()
    if not app.config.get("UPLOAD_FOLDER"):
        app.config["UPLOAD_FOLDER"] = os.path.join(app.static_folder, "images")
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    app.before_request(load_identity)

    @app.context_processor
    def inject_user():
        return {"current_user": g.get("user")}

    from .views import favorites, food_items, hawker_centers, main, recommendations, reviews, stalls

    app.register_blueprint(main.bp)
    app.register_blueprint(stalls.bp)
    app.register_blueprint(hawker_centers.bp)
    app.register_blueprint(food_items.bp)
    app.register_blueprint(reviews.bp)
    app.register_blueprint(favorites.bp)
    app.register_blueprint(recommendations.bp)

    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()

    return app


# --------------------
# Error pages
# --------------------
def _listing_url():
    """The listing page of the blueprint that handled the request."""
    if request.blueprint and request.blueprint != "main":
        return url_for(f"{request.blueprint}.index")
    return url_for("main.index")


def register_error_handlers(app):
    @app.errorhandler(NotAuthenticated)
    def not_authenticated(error):
        flash(error.message, "error")
        target = request.full_path.rstrip("?") if request.method == "GET" else None
        return redirect(url_for("main.login", next=target))

    @app.errorhandler(NotAuthorized)
    @app.errorhandler(NotFound)
    def unavailable(_error):
        flash(UNAVAILABLE, "error")
        return redirect(_listing_url())

    @app.errorhandler(SQLAlchemyError)
    @app.errorhandler(DataAccessFailure)
    def data_access_failure(error):
        if isinstance(error, SQLAlchemyError):
            db.session.rollback()
            logger.exception("Database error on %s %s", request.method, request.path)
        message = DataAccessFailure.message
        if request.method == "GET":
            return render_template("errors/500.html", message=message), 500
        flash(message, "error")
        return redirect(_listing_url())

    @app.errorhandler(HawkerHeroError)
    def hawker_hero_error(error):
        flash(error.message, "error")
        return redirect(_listing_url())

    @app.errorhandler(404)
    def not_found(_e):
        return render_template("errors/404.html"), 404


# --------------------
# Command line
# --------------------
def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database initialised.")

    @app.cli.command("create-admin")
    @click.argument("username")
    @click.argument("email")
    @click.password_option()
    def create_admin(username, email, password):
        """Create an administrator account."""
        from .services import accounts

        try:
            identity = accounts.register(username, email, password, role=Role.ADMIN)
        except HawkerHeroError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Admin {identity.username} created (id {identity.id}).")

    @app.cli.command("purge-sessions")
    def purge_sessions():
        """Delete expired sessions."""
        click.echo(f"Removed {purge_expired_sessions()} expired sessions.")


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=3000, debug=True)
