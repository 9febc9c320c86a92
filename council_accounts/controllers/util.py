"""Helpers for :mod:`council_accounts.controllers`."""

from typing import Any, Dict, Tuple
from http import HTTPStatus as status

from ..domain import FailureKind, Result

ResponseData = Tuple[dict, int, dict]

STATUS_FOR_FAILURE = {
    FailureKind.VALIDATION_ERROR: status.BAD_REQUEST,
    FailureKind.DUPLICATE_USERNAME: status.CONFLICT,
    FailureKind.USER_NOT_FOUND: status.NOT_FOUND,
    FailureKind.SECURITY_NOT_CONFIGURED: status.CONFLICT,
    FailureKind.ANSWER_MISMATCH: status.BAD_REQUEST,
    FailureKind.CURRENT_PASSWORD_INCORRECT: status.FORBIDDEN,
    FailureKind.UNAUTHENTICATED: status.UNAUTHORIZED,
    FailureKind.AUTH_FAILED: status.BAD_REQUEST,
    FailureKind.STORE_FAILURE: status.INTERNAL_SERVER_ERROR,
}

GENERIC_ERROR = 'No se pudo completar la operación. Intente de nuevo.'

MESSAGES = {
    FailureKind.VALIDATION_ERROR: 'Revise los datos del formulario.',
    FailureKind.DUPLICATE_USERNAME: 'El nombre de usuario ya está en uso.',
    FailureKind.USER_NOT_FOUND: 'Usuario no encontrado.',
    FailureKind.SECURITY_NOT_CONFIGURED:
        'Este usuario no tiene configurada una pregunta de seguridad.',
    # Same wording as any other failure; never confirm which part was wrong.
    FailureKind.ANSWER_MISMATCH: GENERIC_ERROR,
    FailureKind.CURRENT_PASSWORD_INCORRECT: 'La contraseña actual es incorrecta.',
    FailureKind.UNAUTHENTICATED: 'Debe iniciar sesión.',
    FailureKind.AUTH_FAILED: 'Usuario o contraseña incorrectos.',
    FailureKind.STORE_FAILURE: GENERIC_ERROR,
}


def failure_response(result: Result) -> ResponseData:
    """Generate response data for a failed :class:`.Result`."""
    assert result.failure is not None
    data: Dict[str, Any] = {
        'reason': result.failure.value,
        'error': MESSAGES.get(result.failure, GENERIC_ERROR),
    }
    if result.errors:
        data['errors'] = result.errors
    return data, STATUS_FOR_FAILURE[result.failure], {}
