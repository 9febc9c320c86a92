"""
Issues and loads authenticated sessions.

A session is a signed JWT carried in a cookie. It binds the holder to a user
id until it expires; nothing about the session is kept server-side.
"""

from datetime import datetime, timedelta
import logging
import secrets

import jwt
from pytz import UTC

from .. import domain
from .exceptions import InvalidToken, SessionExpired

logger = logging.getLogger(__name__)


class SessionIssuer(object):
    """Creates sessions for verified users, and loads them from cookies."""

    def __init__(self, secret: str, duration: int = 36000) -> None:
        """
        Configure the issuer.

        Parameters
        ----------
        secret : str
            Key used to sign session tokens.
        duration : int
            Session lifetime, in seconds.

        """
        self._secret = secret
        self.duration = duration

    def create(self, user_id: str, username: str,
               role: str = domain.ADMIN) -> domain.Session:
        """Create a new session for an authenticated user."""
        start_time = datetime.now(tz=UTC).replace(microsecond=0)
        session = domain.Session(
            session_id=secrets.token_urlsafe(16),
            user_id=user_id,
            username=username,
            start_time=start_time,
            end_time=start_time + timedelta(seconds=self.duration),
            role=role
        )
        logger.debug('Created session %s for user %s', session.session_id,
                     user_id)
        return session

    def generate_cookie(self, session: domain.Session) -> str:
        """Encode ``session`` as a signed token."""
        claims = {
            'sid': session.session_id,
            'sub': session.user_id,
            'name': session.username,
            'role': session.role,
            'iat': int(session.start_time.timestamp()),
            'exp': int(session.end_time.timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm='HS256')

    def load(self, cookie: str) -> domain.Session:
        """
        Load a session from its cookie value.

        Raises
        ------
        :class:`SessionExpired`
            Raised if the session has expired.
        :class:`InvalidToken`
            Raised if the cookie is malformed or was not signed by us.

        """
        try:
            claims = jwt.decode(cookie, self._secret, algorithms=['HS256'],
                                options={'require': ['exp', 'sub']})
        except jwt.exceptions.ExpiredSignatureError as e:
            raise SessionExpired('Session has expired') from e
        except jwt.exceptions.InvalidTokenError as e:
            raise InvalidToken('Not a valid session token') from e
        return domain.Session(
            session_id=claims.get('sid', ''),
            user_id=claims['sub'],
            username=claims.get('name', ''),
            start_time=datetime.fromtimestamp(claims.get('iat', 0), tz=UTC),
            end_time=datetime.fromtimestamp(claims['exp'], tz=UTC),
            role=claims.get('role', domain.ADMIN)
        )
