"""
Controllers for an authenticated user's own account.

The user is always identified by their session. A ``user_id`` in the
submitted form is never consulted.
"""

from typing import Optional
from http import HTTPStatus as status
import logging

from werkzeug.datastructures import MultiDict

from .. import domain
from .auth_flow import AuthFlow
from .util import ResponseData, failure_response

logger = logging.getLogger(__name__)


def _user_id(session: Optional[domain.Session]) -> Optional[str]:
    return session.user_id if session is not None else None


def view(session: Optional[domain.Session], flow: AuthFlow) -> ResponseData:
    """Get the profile of the logged-in user."""
    result = flow.view_profile(_user_id(session))
    if not result.ok:
        return failure_response(result)
    return result.value, status.OK, {}


def change_password(session: Optional[domain.Session], params: MultiDict,
                    flow: AuthFlow) -> ResponseData:
    """
    Change the password of the logged-in user.

    Parameters
    ----------
    session : :class:`.domain.Session` or None
        Session of the requester, if any.
    params : MultiDict
        Should include ``current_password``, ``new_password`` and
        ``confirm_password``.
    flow : :class:`.AuthFlow`

    Returns
    -------
    dict
    int
        200 (OK) if the password was changed.
    dict

    """
    result = flow.change_password(_user_id(session),
                                  params.get('current_password'),
                                  params.get('new_password'),
                                  params.get('confirm_password'))
    if not result.ok:
        return failure_response(result)
    return {'message': 'Contraseña actualizada.'}, status.OK, {}


def update_security(session: Optional[domain.Session], params: MultiDict,
                    flow: AuthFlow) -> ResponseData:
    """Replace the security question and answer of the logged-in user."""
    result = flow.update_security_qa(_user_id(session),
                                     params.get('current_password'),
                                     params.get('security_question'),
                                     params.get('security_answer'))
    if not result.ok:
        return failure_response(result)
    return {'message': 'Pregunta de seguridad actualizada.'}, status.OK, {}
