# Overview: Flask extension instances for database and migrations, plus the service registry.

from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

SERVICES_KEY = "kasir.services"


def get_services():
    """Return the service container wired up by create_app()."""
    return current_app.extensions[SERVICES_KEY]
