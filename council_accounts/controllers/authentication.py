"""
Controllers for logging in and out of the administration portal.

A successful login issues a signed session token, which the UI route sets as
a cookie. Sessions are not stored server-side, so logging out only requires
the cookie to be cleared.
"""

from typing import Any, Dict
from http import HTTPStatus as status
import logging

from werkzeug.datastructures import MultiDict

from ..services.sessions import SessionIssuer
from .auth_flow import AuthFlow
from .util import ResponseData, failure_response

logger = logging.getLogger(__name__)


def login(form_data: MultiDict, flow: AuthFlow, issuer: SessionIssuer,
          next_page: str) -> ResponseData:
    """
    Log a user in with their username and password.

    Parameters
    ----------
    form_data : MultiDict
        Should include ``username`` and ``password`` data.
    flow : :class:`.AuthFlow`
    issuer : :class:`.SessionIssuer`
    next_page : str
        Page to which the user should be redirected upon login.

    Returns
    -------
    dict
        Additional data to add to the response.
    int
        Status code. This should be 303 (See Other) if all goes well.
    dict
        Headers to add to the response.

    """
    logger.debug('Login form submitted')
    result = flow.verify_login(form_data.get('username'),
                               form_data.get('password'))
    if not result.ok:
        logger.debug('Login failed: %s', result.failure)
        return failure_response(result)

    profile = flow.view_profile(result.value)
    if not profile.ok:
        return failure_response(profile)

    session = issuer.create(result.value, profile.value['username'],
                            profile.value['role'])
    cookie = issuer.generate_cookie(session)
    logger.debug('Created session: %s', session.session_id)

    # The UI route should use these to set cookies on the response.
    data: Dict[str, Any] = {
        'user_id': result.value,
        'cookies': {
            'auth_session_cookie': (cookie, issuer.duration)
        }
    }
    return data, status.SEE_OTHER, {'Location': next_page}


def logout(next_page: str) -> ResponseData:
    """
    Log the user out by clearing their session cookie.

    Returns
    -------
    dict
        Additional data to add to the response.
    int
        Status code. This should be 303 (See Other).
    dict
        Headers to add to the response.

    """
    logger.debug('Request to log out')
    data = {
        'cookies': {
            'auth_session_cookie': ('', 0)
        }
    }
    return data, status.SEE_OTHER, {'Location': next_page}
