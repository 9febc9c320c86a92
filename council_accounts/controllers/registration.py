"""
Controller for registration of portal administrators.

Registration does not log the user in. Once their account exists, the user
authenticates through :func:`.authentication.login` like anybody else.
"""

from typing import Any, Dict
from http import HTTPStatus as status
import logging

from werkzeug.datastructures import MultiDict

from .auth_flow import AuthFlow
from .util import ResponseData, failure_response

logger = logging.getLogger(__name__)


def register(params: MultiDict, flow: AuthFlow) -> ResponseData:
    """
    Handle a submitted registration form.

    Parameters
    ----------
    params : MultiDict
        Should include ``username``, ``password``, ``confirm_password``,
        ``security_question`` and ``security_answer``. ``council`` is
        optional.
    flow : :class:`.AuthFlow`

    Returns
    -------
    dict
        The new account, or the reason it could not be created.
    int
        Status code. 201 (Created) if all goes well.
    dict
        Headers to add to the response.

    """
    logger.debug('Registration form submitted')
    result = flow.sign_up(
        username=params.get('username'),
        password=params.get('password'),
        confirm_password=params.get('confirm_password'),
        security_question=params.get('security_question'),
        security_answer=params.get('security_answer'),
        council_name=params.get('council')
    )
    if not result.ok:
        return failure_response(result)

    user = result.value
    data: Dict[str, Any] = {
        'user_id': user.user_id,
        'username': user.username,
        'role': user.role,
    }
    return data, status.CREATED, {}
