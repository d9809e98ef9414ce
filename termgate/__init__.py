"""termgate application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask

from termgate.config import config_by_name
from termgate.extensions import init_extensions


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the termgate Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///"):
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    init_extensions(app)
    _register_gate(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_template_helpers(app)

    from termgate.scripts.manage_terms import register_commands

    register_commands(app)

    return app


def _register_gate(app: Flask) -> None:
    """Install the gate chain before any blueprint view runs."""
    from termgate.core.gate.middleware import init_gate

    init_gate(app)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from termgate.core.admin.controllers import admin_api_bp
    from termgate.core.auth.controllers import auth_pages_bp
    from termgate.core.content.controllers import content_pages_bp

    app.register_blueprint(auth_pages_bp)
    app.register_blueprint(content_pages_bp)
    app.register_blueprint(admin_api_bp, url_prefix="/admin")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_template_helpers(app: Flask) -> None:
    from termgate.core.auth.logout_flow import logout_url

    @app.context_processor
    def inject_logout_url():
        return {"logout_url": logout_url}
