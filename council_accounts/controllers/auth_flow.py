"""
Account operations for the council administration portal.

:class:`AuthFlow` is the only entry point the presentation layer needs:
registration, login verification, the two-step password recovery, and the
self-service changes an authenticated user can make to their own account.

Every operation returns a :class:`.domain.Result`. Expected failures (bad
input, a taken username, a wrong answer...) are reported through
:attr:`.domain.Result.failure` rather than raised, so callers branch on the
:class:`.domain.FailureKind` instead of catching exceptions.

Password recovery is orchestrated by the client. The server does not
remember that :meth:`AuthFlow.lookup_security_question` was called; the
client carries the username on to :meth:`AuthFlow.reset_password_with_security`,
which validates everything again on its own and may be called directly.
"""

from typing import Any, Callable, Optional
from functools import wraps
import logging

from sqlalchemy.exc import SQLAlchemyError

from .. import domain
from ..domain import FailureKind, Result
from ..services.councils import CouncilResolver
from ..services.credentials import CredentialStore
from ..services.exceptions import DuplicateUsername, NoSuchUser, Unavailable
from ..services.passwords import PasswordHasher, normalize_answer
from . import forms

logger = logging.getLogger(__name__)


def handles_store_faults(func: Callable) -> Callable:
    """Report database faults raised by ``func`` as a store failure."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Result:
        try:
            return func(*args, **kwargs)
        except (Unavailable, SQLAlchemyError):
            logger.exception('Store failure during %s', func.__name__)
            return Result.fail(FailureKind.STORE_FAILURE)
    return wrapper


class AuthFlow(object):
    """Registration, login, recovery and self-service account changes."""

    def __init__(self, store: CredentialStore, councils: CouncilResolver,
                 hasher: PasswordHasher) -> None:
        self.store = store
        self.councils = councils
        self.hasher = hasher

    @handles_store_faults
    def sign_up(self, username: Optional[str], password: Optional[str],
                confirm_password: Optional[str],
                security_question: Optional[str],
                security_answer: Optional[str],
                council_name: Optional[str] = None) -> Result:
        """
        Register a new administrator account.

        The new user is not logged in; they must authenticate separately.

        Parameters
        ----------
        username : str
            At least three characters, unique.
        password : str
            At least six characters.
        confirm_password : str
            Must equal ``password``.
        security_question : str
            One of :data:`.domain.SECURITY_QUESTIONS`.
        security_answer : str
            At least two characters. Stored normalized and hashed.
        council_name : str or None
            Community council of the user. Created if it does not exist; if
            omitted, the default council is used.

        Returns
        -------
        :class:`.domain.Result`
            The created :class:`.domain.User` on success. Fails with
            ``VALIDATION_ERROR``, ``DUPLICATE_USERNAME`` or ``STORE_FAILURE``.

        """
        form = forms.SignUpForm(forms.formdata(
            username=username,
            password=password,
            confirm_password=confirm_password,
            council=council_name,
            security_question=security_question,
            security_answer=security_answer
        ))
        if not form.validate():
            logger.debug('Registration data not valid: %s', list(form.errors))
            return Result.fail(FailureKind.VALIDATION_ERROR, form.errors)

        if self.store.find_by_username(form.username.data) is not None:
            logger.debug('Username %s is taken', form.username.data)
            return Result.fail(FailureKind.DUPLICATE_USERNAME)

        council_id = self.councils.find_or_create(form.council.data)
        answer = normalize_answer(form.security_answer.data)
        new_user = domain.User(
            username=form.username.data,
            password_hash=self.hasher.hash(form.password.data),
            role=domain.ADMIN,
            council_id=council_id,
            security_question=form.security_question.data,
            security_answer_hash=self.hasher.hash(answer)
        )
        try:
            user = self.store.insert(new_user)
        except DuplicateUsername:
            logger.debug('Username %s was taken concurrently',
                         form.username.data)
            return Result.fail(FailureKind.DUPLICATE_USERNAME)
        logger.info('Registered user %s', user.user_id)
        return Result.success(user)

    @handles_store_faults
    def verify_login(self, username: Optional[str],
                     password: Optional[str]) -> Result:
        """
        Check a username and password.

        Unknown usernames and wrong passwords fail the same way, with
        ``AUTH_FAILED``. On success the result carries the user id, for the
        session issuer.
        """
        form = forms.LoginForm(forms.formdata(username=username,
                                              password=password))
        if not form.validate():
            return Result.fail(FailureKind.VALIDATION_ERROR, form.errors)

        user = self.store.find_by_username(form.username.data)
        if user is None:
            logger.debug('No such user: %s', form.username.data)
            return Result.fail(FailureKind.AUTH_FAILED)
        if not self.hasher.check(form.password.data, user.password_hash):
            logger.debug('Incorrect password for user %s', user.user_id)
            return Result.fail(FailureKind.AUTH_FAILED)
        return Result.success(user.user_id)

    @handles_store_faults
    def lookup_security_question(self, username: Optional[str]) -> Result:
        """
        Start password recovery by getting the user's security question.

        Returns
        -------
        :class:`.domain.Result`
            The question text on success. Fails with ``VALIDATION_ERROR``,
            ``USER_NOT_FOUND``, ``SECURITY_NOT_CONFIGURED`` or
            ``STORE_FAILURE``.

        """
        form = forms.LookupForm(forms.formdata(username=username))
        if not form.validate():
            return Result.fail(FailureKind.VALIDATION_ERROR, form.errors)

        user = self.store.find_by_username(form.username.data)
        if user is None:
            return Result.fail(FailureKind.USER_NOT_FOUND)
        if not user.security_configured:
            logger.info('User %s has no security question', user.user_id)
            return Result.fail(FailureKind.SECURITY_NOT_CONFIGURED)
        return Result.success(user.security_question)

    @handles_store_faults
    def reset_password_with_security(self, username: Optional[str],
                                     answer: Optional[str],
                                     new_password: Optional[str]) -> Result:
        """
        Finish password recovery: check the answer and set a new password.

        The supplied answer is normalized the same way as at registration and
        checked against the stored hash. A wrong answer leaves the password
        untouched. Callers must not retry automatically on
        ``ANSWER_MISMATCH``.

        Returns
        -------
        :class:`.domain.Result`
            Fails with ``VALIDATION_ERROR``, ``USER_NOT_FOUND``,
            ``SECURITY_NOT_CONFIGURED``, ``ANSWER_MISMATCH`` or
            ``STORE_FAILURE``.

        """
        form = forms.ResetForm(forms.formdata(username=username,
                                              answer=answer,
                                              new_password=new_password))
        if not form.validate():
            return Result.fail(FailureKind.VALIDATION_ERROR, form.errors)

        # The account may have been removed since the question was shown.
        user = self.store.find_by_username(form.username.data)
        if user is None:
            return Result.fail(FailureKind.USER_NOT_FOUND)
        if not user.security_configured:
            return Result.fail(FailureKind.SECURITY_NOT_CONFIGURED)

        if not self.hasher.check(normalize_answer(form.answer.data),
                                 user.security_answer_hash):
            logger.info('Wrong security answer for user %s', user.user_id)
            return Result.fail(FailureKind.ANSWER_MISMATCH)

        try:
            self.store.update_password_hash(
                user.user_id, self.hasher.hash(form.new_password.data)
            )
        except NoSuchUser:
            return Result.fail(FailureKind.USER_NOT_FOUND)
        logger.info('Password reset with security answer for user %s',
                    user.user_id)
        return Result.success()

    @handles_store_faults
    def change_password(self, user_id: Optional[str],
                        current_password: Optional[str],
                        new_password: Optional[str],
                        confirm_password: Optional[str]) -> Result:
        """
        Change the password of an authenticated user.

        ``user_id`` must come from the caller's session, never from the
        submitted form. ``None`` means there is no valid session.

        Returns
        -------
        :class:`.domain.Result`
            Fails with ``UNAUTHENTICATED``, ``VALIDATION_ERROR``,
            ``CURRENT_PASSWORD_INCORRECT`` or ``STORE_FAILURE``.

        """
        user = self._authenticated_user(user_id)
        if user is None:
            return Result.fail(FailureKind.UNAUTHENTICATED)

        form = forms.ChangePasswordForm(forms.formdata(
            current_password=current_password,
            new_password=new_password,
            confirm_password=confirm_password
        ))
        if not form.validate():
            return Result.fail(FailureKind.VALIDATION_ERROR, form.errors)

        if not self.hasher.check(form.current_password.data,
                                 user.password_hash):
            logger.debug('Current password incorrect for user %s',
                         user.user_id)
            return Result.fail(FailureKind.CURRENT_PASSWORD_INCORRECT)

        try:
            self.store.update_password_hash(
                user.user_id, self.hasher.hash(form.new_password.data)
            )
        except NoSuchUser:
            return Result.fail(FailureKind.UNAUTHENTICATED)
        logger.info('Password changed for user %s', user.user_id)
        return Result.success()

    @handles_store_faults
    def update_security_qa(self, user_id: Optional[str],
                           current_password: Optional[str],
                           security_question: Optional[str],
                           security_answer: Optional[str]) -> Result:
        """
        Replace the security question and answer of an authenticated user.

        The question and the answer hash are written together or not at all.

        Returns
        -------
        :class:`.domain.Result`
            Fails with ``UNAUTHENTICATED``, ``VALIDATION_ERROR``,
            ``CURRENT_PASSWORD_INCORRECT`` or ``STORE_FAILURE``.

        """
        user = self._authenticated_user(user_id)
        if user is None:
            return Result.fail(FailureKind.UNAUTHENTICATED)

        form = forms.SecurityQAForm(forms.formdata(
            current_password=current_password,
            security_question=security_question,
            security_answer=security_answer
        ))
        if not form.validate():
            return Result.fail(FailureKind.VALIDATION_ERROR, form.errors)

        if not self.hasher.check(form.current_password.data,
                                 user.password_hash):
            return Result.fail(FailureKind.CURRENT_PASSWORD_INCORRECT)

        answer_hash = self.hasher.hash(
            normalize_answer(form.security_answer.data)
        )
        try:
            self.store.update_security_qa(user.user_id,
                                          form.security_question.data,
                                          answer_hash)
        except NoSuchUser:
            return Result.fail(FailureKind.UNAUTHENTICATED)
        logger.info('Security question updated for user %s', user.user_id)
        return Result.success()

    @handles_store_faults
    def view_profile(self, user_id: Optional[str]) -> Result:
        """Get the public account details of an authenticated user."""
        user = self._authenticated_user(user_id)
        if user is None:
            return Result.fail(FailureKind.UNAUTHENTICATED)
        council = self.councils.get(user.council_id) \
            if user.council_id else None
        return Result.success({
            'user_id': user.user_id,
            'username': user.username,
            'role': user.role,
            'role_display': user.role_display,
            'council': council.name if council is not None else None,
            'security_question': user.security_question
            if user.security_configured else None,
        })

    def _authenticated_user(self,
                            user_id: Optional[str]) -> Optional[domain.User]:
        if not user_id:
            return None
        return self.store.find_by_id(user_id)
