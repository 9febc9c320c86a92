"""Defines the core data structures for the council accounts service."""

from typing import Any, Dict, List, NamedTuple, Optional
from datetime import datetime
from enum import Enum


ADMIN = 'Admin'
ELDERLY_MANAGER = 'Gestor Adulto Mayor'
DISABILITY_MANAGER = 'Gestor Discapacidad'
ROLES = [ADMIN, ELDERLY_MANAGER, DISABILITY_MANAGER]
"""Roles of the council members who administer the portal."""

ROLE_DISPLAY_NAMES = {ADMIN: 'Administrador'}

SECURITY_QUESTIONS = [
    '¿Cuál es el nombre de tu primera mascota?',
    '¿En qué ciudad naciste?',
    '¿Cuál es el nombre de tu abuela materna?',
    '¿Cuál fue tu primer vehículo?',
    '¿Cuál es tu comida favorita?',
    '¿Cómo se llamaba tu escuela primaria?',
]
"""The only questions a user may choose for password recovery."""

DEFAULT_SECURITY_QUESTION = SECURITY_QUESTIONS[0]

DEFAULT_COUNCIL_NAME = 'Valle Verde I'


class User(NamedTuple):
    """A council member with access to the administration portal."""

    username: str
    """Unique, case-sensitive login name."""

    password_hash: str
    """Bcrypt hash of the current password."""

    role: str = ADMIN
    """One of :data:`ROLES`."""

    user_id: Optional[str] = None
    """Unique identifier for the user. If ``None``, the user does not exist."""

    council_id: Optional[str] = None
    """The community council to which the user belongs (if any)."""

    security_question: str = DEFAULT_SECURITY_QUESTION
    """One of :data:`SECURITY_QUESTIONS`."""

    security_answer_hash: str = ''
    """
    Bcrypt hash of the normalized security answer.

    Accounts created before password recovery existed carry an empty string
    here.
    """

    created_at: Optional[datetime] = None

    @property
    def security_configured(self) -> bool:
        """Whether the account can be recovered with its security question."""
        return bool(self.security_question and self.security_question.strip()
                    and self.security_answer_hash)

    @property
    def role_display(self) -> str:
        """The display name of the user's role."""
        return ROLE_DISPLAY_NAMES.get(self.role, self.role)


class Council(NamedTuple):
    """A community council, the organizational unit of a user."""

    name: str
    parish: str
    municipality: str
    state: str
    council_id: Optional[str] = None


class Session(NamedTuple):
    """An authenticated session issued after a successful login."""

    session_id: str
    """Unique identifier for the session."""

    user_id: str
    """The user for which the session was created."""

    username: str

    start_time: datetime
    """When the session was created."""

    end_time: datetime
    """When the session expires."""

    role: str = ADMIN
    """Role of the user at the time the session was created."""


class FailureKind(Enum):
    """Reasons why an account operation did not succeed."""

    VALIDATION_ERROR = 'validation_error'
    DUPLICATE_USERNAME = 'duplicate_username'
    USER_NOT_FOUND = 'user_not_found'
    SECURITY_NOT_CONFIGURED = 'security_not_configured'
    ANSWER_MISMATCH = 'answer_mismatch'
    CURRENT_PASSWORD_INCORRECT = 'current_password_incorrect'
    UNAUTHENTICATED = 'unauthenticated'
    AUTH_FAILED = 'auth_failed'
    STORE_FAILURE = 'store_failure'


class Result(NamedTuple):
    """
    Outcome of an account operation.

    Exactly one of ``value`` (on success) or ``failure`` is meaningful.
    Callers are expected to branch on :attr:`ok` and, when it is ``False``,
    on the :class:`FailureKind` in ``failure``.
    """

    value: Any = None
    """Payload of a successful operation."""

    failure: Optional[FailureKind] = None
    """Why the operation failed. ``None`` on success."""

    errors: Dict[str, List[str]] = {}
    """Field-level messages for :attr:`FailureKind.VALIDATION_ERROR`."""

    @property
    def ok(self) -> bool:
        """Whether the operation succeeded."""
        return self.failure is None

    @classmethod
    def success(cls, value: Any = None) -> 'Result':
        """Generate a successful result carrying ``value``."""
        return cls(value=value)

    @classmethod
    def fail(cls, failure: FailureKind,
             errors: Optional[Dict[str, List[str]]] = None) -> 'Result':
        """Generate a failed result of kind ``failure``."""
        return cls(failure=failure, errors=dict(errors or {}))
