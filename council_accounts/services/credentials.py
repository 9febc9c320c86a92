"""
Credential store: persistence and lookup of portal user accounts.

The store is constructed from an explicit SQLAlchemy :class:`.Engine` and
handed to whatever needs it; there is no module-level database handle. Each
operation runs in its own short-lived session, which is committed when the
operation succeeds and rolled back otherwise.
"""

from typing import Generator, Optional
from contextlib import contextmanager
from datetime import datetime
import logging
import secrets

from pytz import UTC
from retry import retry
from sqlalchemy import select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from .. import domain
from .exceptions import DuplicateUsername, NoSuchUser, Unavailable
from .models import Base, DBUser

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Generate an opaque identifier for a new row."""
    return secrets.token_urlsafe(16)


def now() -> datetime:
    """Get the current time, in UTC."""
    return datetime.now(tz=UTC)


class CredentialStore(object):
    """Reads and writes :class:`.domain.User` records."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessionmaker = sessionmaker(bind=engine, expire_on_commit=False)

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """Context manager for a database transaction."""
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except OperationalError as e:
            logger.error('Database is unavailable, rolling back: %s', e)
            session.rollback()
            raise Unavailable('Database is temporarily unavailable') from e
        except Exception as e:
            logger.warning('Commit failed, rolling back: %s', e)
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(self.engine)

    def is_available(self) -> bool:
        """Check our connection to the database."""
        try:
            with self.transaction() as session:
                session.execute(text('SELECT 1'))
        except Exception as e:
            logger.error('Encountered an error talking to database: %s', e)
            return False
        return True

    @retry(Unavailable, tries=3, delay=0.5, backoff=2)
    def find_by_username(self, username: str) -> Optional[domain.User]:
        """
        Look up a user by username.

        The match is exact: no case folding or trimming is applied.

        Parameters
        ----------
        username : str

        Returns
        -------
        :class:`.domain.User` or None

        Raises
        ------
        :class:`Unavailable`
            Raised if the database could not be reached after retrying.

        """
        with self.transaction() as session:
            db_user = session.scalar(
                select(DBUser).where(DBUser.username == username)
            )
            return db_user.to_domain() if db_user is not None else None

    @retry(Unavailable, tries=3, delay=0.5, backoff=2)
    def find_by_id(self, user_id: str) -> Optional[domain.User]:
        """Look up a user by primary key."""
        with self.transaction() as session:
            db_user = session.get(DBUser, user_id)
            return db_user.to_domain() if db_user is not None else None

    def insert(self, user: domain.User) -> domain.User:
        """
        Create a new user.

        The username is checked before the insert, but two concurrent
        registrations can both pass that check. The unique constraint on the
        table has the final say, and a violation of it is reported the same
        way as a failed check.

        Parameters
        ----------
        user : :class:`.domain.User`
            Data for the new account. ``user_id`` and ``created_at`` are
            generated if not set.

        Returns
        -------
        :class:`.domain.User`
            The stored account.

        Raises
        ------
        :class:`DuplicateUsername`
            Raised if an account with the same username already exists.

        """
        if self.find_by_username(user.username) is not None:
            raise DuplicateUsername('Username is already taken')

        db_user = DBUser(
            user_id=user.user_id or new_id(),
            username=user.username,
            password_hash=user.password_hash,
            role=user.role,
            council_id=user.council_id,
            security_question=user.security_question,
            security_answer_hash=user.security_answer_hash,
            created_at=user.created_at or now()
        )
        try:
            with self.transaction() as session:
                session.add(db_user)
        except IntegrityError as e:
            if self.find_by_username(user.username) is not None:
                raise DuplicateUsername('Username is already taken') from e
            raise
        logger.debug('Created user %s', db_user.user_id)
        return db_user.to_domain()

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        """
        Replace the password hash of a user.

        Raises
        ------
        :class:`NoSuchUser`
            Raised if there is no user with ``user_id``.

        """
        with self.transaction() as session:
            matched = session.execute(
                update(DBUser)
                .where(DBUser.user_id == user_id)
                .values(password_hash=password_hash)
            ).rowcount
        if not matched:
            raise NoSuchUser('User does not exist')

    def update_security_qa(self, user_id: str, question: str,
                           answer_hash: str) -> None:
        """
        Replace the security question and answer hash of a user.

        Both columns are written by the same statement, so a failure leaves
        neither of them changed.

        Raises
        ------
        :class:`NoSuchUser`
            Raised if there is no user with ``user_id``.

        """
        with self.transaction() as session:
            matched = session.execute(
                update(DBUser)
                .where(DBUser.user_id == user_id)
                .values(security_question=question,
                        security_answer_hash=answer_hash)
            ).rowcount
        if not matched:
            raise NoSuchUser('User does not exist')
