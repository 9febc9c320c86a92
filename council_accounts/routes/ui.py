"""Provides Flask integration for the portal's account endpoints."""

from datetime import timedelta
from http import HTTPStatus as status
import logging

from flask import Blueprint, Response, current_app, jsonify, \
    make_response, redirect, request

from ..controllers import authentication, profile, recovery, registration
from ..controllers.auth_flow import AuthFlow
from ..controllers.util import ResponseData

logger = logging.getLogger(__name__)
blueprint = Blueprint('ui', __name__, url_prefix='')


def get_flow() -> AuthFlow:
    """Get the :class:`.AuthFlow` of the current application."""
    flow: AuthFlow = current_app.config['council_accounts.AuthFlow']
    return flow


def set_cookies(response: Response, data: dict) -> None:
    """
    Update a :class:`.Response` with cookies in controller data.

    Contollers seeking to update cookies must include a 'cookies' key
    in their response data.
    """
    cookies = data.pop('cookies', None)
    if cookies is None:
        return None
    for cookie_key, (cookie_value, expires) in cookies.items():
        cookie_name = current_app.config[f'{cookie_key.upper()}_NAME']
        max_age = timedelta(seconds=expires)
        params = dict(httponly=True)
        if current_app.config['AUTH_SESSION_COOKIE_SECURE']:
            # Setting samesite to lax, to allow reasonable links to
            # authenticated views using GET requests.
            params.update({'secure': True, 'samesite': 'lax'})
        response.set_cookie(cookie_name, cookie_value, max_age=max_age,
                            **params)


def to_response(response_data: ResponseData) -> Response:
    """Render controller data as JSON, or as a redirect on 303."""
    data, code, headers = response_data
    if code == status.SEE_OTHER:
        response = make_response(redirect(headers['Location'], code=code))
    else:
        response = make_response(jsonify(data), code, headers)
    set_cookies(response, data)
    return response


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


@blueprint.route('/register', methods=['POST'])
def register() -> Response:
    """Create a new administrator account."""
    return to_response(registration.register(request.form, get_flow()))


@blueprint.route('/login', methods=['POST'])
def login() -> Response:
    """Log in with username and password."""
    issuer = current_app.config['council_accounts.Auth'].issuer
    next_page = current_app.config['DEFAULT_LOGIN_REDIRECT_URL']
    logger.debug('Request to log in, then redirect to %s', next_page)
    # Cookie data goes on the response, so the route sets it.
    return to_response(authentication.login(request.form, get_flow(), issuer,
                                            next_page))


@blueprint.route('/logout', methods=['GET'])
def logout() -> Response:
    """Log out of the portal."""
    next_page = current_app.config['DEFAULT_LOGOUT_REDIRECT_URL']
    return to_response(authentication.logout(next_page))


@blueprint.route('/recovery/question', methods=['POST'])
def recovery_question() -> Response:
    """First step of password recovery."""
    return to_response(recovery.question(request.form, get_flow()))


@blueprint.route('/recovery/reset', methods=['POST'])
def recovery_reset() -> Response:
    """Second step of password recovery."""
    return to_response(recovery.reset(request.form, get_flow()))


@blueprint.route('/profile', methods=['GET'])
def view_profile() -> Response:
    """Show the account of the logged-in user."""
    return to_response(profile.view(request.auth, get_flow()))


@blueprint.route('/profile/password', methods=['POST'])
def change_password() -> Response:
    """Change the password of the logged-in user."""
    return to_response(profile.change_password(request.auth, request.form,
                                               get_flow()))


@blueprint.route('/profile/security', methods=['POST'])
def update_security() -> Response:
    """Change the security question of the logged-in user."""
    return to_response(profile.update_security(request.auth, request.form,
                                               get_flow()))


@blueprint.route('/auth_status', methods=['GET'])
def auth_status() -> Response:
    """Get if the app is running."""
    if not get_flow().store.is_available():
        return make_response("Database unavailable",
                             status.SERVICE_UNAVAILABLE)
    return make_response("OK")
