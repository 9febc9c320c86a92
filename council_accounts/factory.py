"""Application factory for the council accounts app."""

from flask import Flask
from sqlalchemy import create_engine

from .app_logging import setup_logger
from .auth import Auth
from .controllers.auth_flow import AuthFlow
from .routes import ui
from .services.councils import CouncilResolver
from .services.credentials import CredentialStore
from .services.passwords import PasswordHasher


def create_web_app() -> Flask:
    """Initialize and configure the council accounts application."""
    app = Flask('council_accounts')
    app.config.from_pyfile('config.py')
    setup_logger(app.config['LOGLEVEL'])

    # Keep bound parameters, which include hashes, out of error messages.
    engine = create_engine(app.config['COUNCIL_DATABASE_URI'],
                           hide_parameters=True)
    app.config['DB_ENGINE'] = engine

    store = CredentialStore(engine)
    councils = CouncilResolver(store, app.config['DEFAULT_COUNCIL_NAME'])
    hasher = PasswordHasher(int(app.config['BCRYPT_ROUNDS']))
    app.config['council_accounts.AuthFlow'] = AuthFlow(store, councils, hasher)

    Auth(app)   # Attaches the caller's session to each request.
    app.register_blueprint(ui.blueprint)

    if app.config['CREATE_DB']:
        store.create_all()

    return app
