# backend/kasir/__init__.py
from __future__ import annotations

from flask import Flask

from .config import Config
from .extensions import SERVICES_KEY, db, migrate


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Module loggers under "kasir.*" propagate to app.logger
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401
    from .services import build_services

    use_database = bool(app.config["USE_DATABASE"])
    app.extensions[SERVICES_KEY] = build_services(
        use_database=use_database,
        atomic_checkout=bool(app.config["ATOMIC_CHECKOUT"]),
    )
    if use_database:
        if app.config["AUTO_CREATE_TABLES"]:
            with app.app_context():
                db.create_all()
        app.logger.info("Using SQL storage")
    else:
        app.logger.info("Using in-memory storage")

    from .middleware import register_middleware
    register_middleware(app)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.categories import categories_bp
    from .routes.products import products_bp
    from .routes.transactions import transactions_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(reports_bp)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
