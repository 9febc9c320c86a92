"""Attaches authenticated sessions to incoming requests."""

from typing import Optional
import logging

from flask import Flask, request, Response

from . import domain
from .services.exceptions import InvalidToken, SessionExpired
from .services.sessions import SessionIssuer

logger = logging.getLogger(__name__)


class Auth(object):
    """
    Attaches session information to the request.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from council_accounts.auth import Auth


       def create_web_app() -> Flask:
          app = Flask('council_accounts')
          app.config.from_pyfile('config.py')
          Auth(app)   # Registers the before_request session check
          return app

    After :meth:`load_session` has run, ``request.auth`` is the
    :class:`.domain.Session` of the caller, or ``None``.
    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """
        Attach :meth:`.load_session` to the Flask app.

        Parameters
        ----------
        app : :class:`Flask`

        """
        self.app = app
        app.config['council_accounts.Auth'] = self
        self.issuer = SessionIssuer(app.config['JWT_SECRET'],
                                    int(app.config['SESSION_DURATION']))
        self.app.before_request(self.load_session)

    def load_session(self) -> Optional[Response]:
        """Look for a valid session cookie, and attach it to the request."""
        cookie = request.cookies.get(self.app.config['AUTH_SESSION_COOKIE_NAME'])
        request.auth = self.first_valid(cookie)
        return None

    def first_valid(self, cookie: Optional[str]) -> Optional[domain.Session]:
        """Load the session in ``cookie``, or ``None`` if it is not usable."""
        if not cookie:
            return None
        try:
            return self.issuer.load(cookie)
        except SessionExpired as e:
            logger.debug('Session is expired: %s', e)
        except InvalidToken as e:
            logger.debug('Invalid session cookie: %s', e)
        return None
