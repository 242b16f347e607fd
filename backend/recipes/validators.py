import re

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator

from access.policy import Role
from recipes.constants import (PASSWORD_MAX_LENGTH, SLUG_REGEX,
                               USERNAME_FORBIDDEN, USERNAME_REGEX)

# Роли, которые пользователь может выбрать сам при регистрации.
SELF_ASSIGNABLE_ROLES = (Role.USER.value, Role.CHEF.value)

slug_validator = RegexValidator(
    regex=SLUG_REGEX,
    message='Слаг тега может содержать только латинские буквы, цифры, '
            'дефисы и подчеркивания',
    code='invalid_slug'
)


def username_validator(value):
    """Проверяет допустимые символы и зарезервированные никнеймы."""
    if not re.match(USERNAME_REGEX, value):
        raise ValidationError(
            'Никнейм может содержать только буквы, цифры и символы '
            '@ . + - _',
            code='invalid_username'
        )
    if value.lower() in USERNAME_FORBIDDEN:
        raise ValidationError(
            'Никнейм "%(forbidden)s" зарезервирован.',
            code='forbidden_username',
            params={'forbidden': value},
        )


def self_assignable_role_validator(value):
    """Роль администратора нельзя выбрать при регистрации."""
    if value not in SELF_ASSIGNABLE_ROLES:
        raise ValidationError(
            f'При регистрации доступны роли: '
            f'{", ".join(SELF_ASSIGNABLE_ROLES)}.',
            code='role_not_assignable',
        )


class PasswordMaxLengthValidator:
    """Ограничивает длину пароля сверху (AUTH_PASSWORD_VALIDATORS)."""

    def __init__(self, max_length=PASSWORD_MAX_LENGTH):
        self.max_length = max_length

    def validate(self, password, user=None):
        if len(password) > self.max_length:
            raise ValidationError(
                f'Пароль длиннее {self.max_length} символов.',
                code='password_too_long',
                params={'max_length': self.max_length},
            )

    def get_help_text(self):
        return f'Пароль не длиннее {self.max_length} символов.'
