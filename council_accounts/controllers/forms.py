"""Provides forms for registration, login, recovery and profile changes."""

from typing import Any, Optional

from werkzeug.datastructures import MultiDict
from wtforms import Form, PasswordField, SelectField, StringField
from wtforms.validators import DataRequired, Length, ValidationError, \
    optional

from .. import domain

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
MIN_ANSWER_LENGTH = 2

QUESTION_CHOICES = [(question, question)
                    for question in domain.SECURITY_QUESTIONS]


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


class LoginForm(Form):
    """Log in form."""

    username = StringField('Nombre de usuario', validators=[DataRequired()])
    password = PasswordField('Contraseña', validators=[DataRequired()])


class SignUpForm(Form):
    """Registration form for a new administrator account."""

    username = StringField(
        'Nombre de usuario',
        validators=[DataRequired(),
                    Length(min=MIN_USERNAME_LENGTH, max=255)]
    )
    password = PasswordField(
        'Contraseña',
        validators=[DataRequired(), Length(min=MIN_PASSWORD_LENGTH)]
    )
    confirm_password = PasswordField('Confirmar contraseña',
                                     validators=[DataRequired()])
    council = StringField('Consejo comunal',
                          validators=[optional(), Length(max=255)])
    security_question = SelectField('Pregunta de seguridad',
                                    choices=QUESTION_CHOICES,
                                    validators=[DataRequired()])
    security_answer = StringField(
        'Respuesta de seguridad',
        validators=[DataRequired(), Length(min=MIN_ANSWER_LENGTH)],
        filters=[_strip]
    )

    def validate_confirm_password(self, field: PasswordField) -> None:
        """Verify that the password is the same in both fields."""
        if self.password.data != field.data:
            raise ValidationError('Las contraseñas no coinciden')


class LookupForm(Form):
    """First step of password recovery: who is recovering?"""

    username = StringField('Nombre de usuario', validators=[DataRequired()])


class ResetForm(Form):
    """Second step of password recovery: answer and new password."""

    username = StringField('Nombre de usuario', validators=[DataRequired()])
    answer = StringField('Respuesta de seguridad',
                         validators=[DataRequired()])
    new_password = PasswordField(
        'Nueva contraseña',
        validators=[DataRequired(), Length(min=MIN_PASSWORD_LENGTH)]
    )


class ChangePasswordForm(Form):
    """Authenticated password change."""

    current_password = PasswordField('Contraseña actual',
                                     validators=[DataRequired()])
    new_password = PasswordField(
        'Nueva contraseña',
        validators=[DataRequired(), Length(min=MIN_PASSWORD_LENGTH)]
    )
    confirm_password = PasswordField('Confirmar contraseña',
                                     validators=[DataRequired()])

    def validate_confirm_password(self, field: PasswordField) -> None:
        """Verify that the new password is the same in both fields."""
        if self.new_password.data != field.data:
            raise ValidationError('Las contraseñas no coinciden')


class SecurityQAForm(Form):
    """Authenticated change of the security question and answer."""

    current_password = PasswordField('Contraseña actual',
                                     validators=[DataRequired()])
    security_question = SelectField('Pregunta de seguridad',
                                    choices=QUESTION_CHOICES,
                                    validators=[DataRequired()])
    security_answer = StringField(
        'Respuesta de seguridad',
        validators=[DataRequired(), Length(min=MIN_ANSWER_LENGTH)],
        filters=[_strip]
    )


def formdata(**values: Any) -> MultiDict:
    """Build form data from keyword values, leaving out missing ones."""
    return MultiDict([(key, value) for key, value in values.items()
                      if value is not None])
