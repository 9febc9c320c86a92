"""
Controllers for password recovery with a security question.

Recovery takes two requests. The first (:func:`question`) shows the user
their security question. The second (:func:`reset`) submits the username
again along with the answer and a new password. Nothing is remembered between
the two, so :func:`reset` checks everything on its own.
"""

from http import HTTPStatus as status
import logging

from werkzeug.datastructures import MultiDict

from .auth_flow import AuthFlow
from .util import ResponseData, failure_response

logger = logging.getLogger(__name__)


def question(params: MultiDict, flow: AuthFlow) -> ResponseData:
    """Get the security question of the user named in ``params``."""
    result = flow.lookup_security_question(params.get('username'))
    if not result.ok:
        return failure_response(result)
    data = {'username': params.get('username'), 'question': result.value}
    return data, status.OK, {}


def reset(params: MultiDict, flow: AuthFlow) -> ResponseData:
    """
    Set a new password if the security answer is correct.

    Parameters
    ----------
    params : MultiDict
        Should include ``username``, ``answer`` and ``new_password``.
    flow : :class:`.AuthFlow`

    Returns
    -------
    dict
    int
        200 (OK) if the password was reset.
    dict

    """
    result = flow.reset_password_with_security(
        params.get('username'),
        params.get('answer'),
        params.get('new_password')
    )
    if not result.ok:
        return failure_response(result)
    return {'message': 'Contraseña restablecida.'}, status.OK, {}
