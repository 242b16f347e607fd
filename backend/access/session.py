"""
Состояние аутентификации: ``Unresolved -> Authenticated(subject) | Anonymous``.

Пока сессия не проверена, политику нельзя вызывать для решений о
перенаправлении: «ещё неизвестно» не означает «запрещено».
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type

from access.exceptions import PolicyPreconditionError
from access.policy import Subject

logger = logging.getLogger(__name__)

RESOLUTION_ERRORS: Tuple[Type[BaseException], ...] = (
    LookupError,
    ValueError,
)


class _Marker:
    __slots__ = ('name',)

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return self.name


UNRESOLVED = _Marker('Unresolved')
ANONYMOUS = _Marker('Anonymous')


@dataclass(frozen=True)
class Authenticated:
    subject: Subject


def is_resolved(state) -> bool:
    return state is not UNRESOLVED


def subject_of(state) -> Optional[Subject]:
    """Возвращает субъекта разрешённого состояния или ``None`` для гостя."""
    if state is UNRESOLVED:
        raise PolicyPreconditionError(
            'Состояние аутентификации ещё не определено.'
        )
    if state is ANONYMOUS:
        return None
    if isinstance(state, Authenticated):
        return state.subject
    raise PolicyPreconditionError(
        f'Неизвестное состояние аутентификации: {state!r}'
    )


def resolve(
    stored_ref,
    resolve_subject: Callable[..., Optional[Subject]],
    errors: Tuple[Type[BaseException], ...] = RESOLUTION_ERRORS,
):
    """
    Переводит состояние из ``Unresolved`` в разрешённое.

    :param stored_ref: Сохранённая ссылка на сессию (токен, id, объект).
    :param resolve_subject: Функция, загружающая субъекта по ссылке.
    :param errors: Исключения загрузки, равнозначные отсутствию сессии.
    :return: ``Authenticated(subject)`` или ``ANONYMOUS``.
    """
    if stored_ref is None or stored_ref == '':
        return ANONYMOUS
    try:
        subject = resolve_subject(stored_ref)
    except errors as e:
        logger.warning(f'Не удалось восстановить сессию: {e}')
        return ANONYMOUS
    if subject is None:
        return ANONYMOUS
    return Authenticated(subject)


def logout(state):
    if state is UNRESOLVED:
        raise PolicyPreconditionError(
            'Нельзя выйти из сессии, которая ещё не проверена.'
        )
    return ANONYMOUS
