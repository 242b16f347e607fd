"""
Ответы API на отказ в доступе.

Отказ политики превращается в ответ с полями ``detail``, ``reason`` и
``redirect``: клиент по ``reason`` выбирает сообщение, а по ``redirect``
страницу, на которую нужно перейти. «Не найдено», «не вошёл» и «нет прав»
всегда различаются в ответе.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import (AuthenticationFailed, NotAuthenticated,
                                       PermissionDenied)

from access.policy import (DENY_FORBIDDEN, DENY_UNAUTHENTICATED, Allow,
                           Reason)

logger = logging.getLogger(__name__)

NOT_FOUND_REASON = 'not_found'


def _denial_detail(decision):
    return {
        'detail': decision.message,
        'reason': decision.reason.value,
        'redirect': decision.redirect,
    }


class LoginRequired(NotAuthenticated):
    """Нет сессии: 401 и перенаправление на страницу входа."""

    def __init__(self, decision=DENY_UNAUTHENTICATED):
        self.decision = decision
        super().__init__(detail=_denial_detail(decision))


class AccessDenied(PermissionDenied):
    """Сессия есть, но роли или владения недостаточно: 403."""

    def __init__(self, decision=DENY_FORBIDDEN):
        self.decision = decision
        super().__init__(detail=_denial_detail(decision))


def raise_for(decision):
    """
    Выбрасывает исключение DRF для отказа политики.

    :param decision: Результат ``access.policy``: ``Allow`` или ``Deny``.
    :return: True, если доступ разрешён.
    """
    if isinstance(decision, Allow):
        return True
    if decision.reason == Reason.UNAUTHENTICATED:
        raise LoginRequired(decision)
    raise AccessDenied(decision)


def exception_handler(exc, context):
    """
    Обработчик исключений DRF (настройка ``EXCEPTION_HANDLER``).

    Дополняет стандартные ответы 401/403/404 полями ``reason`` и
    ``redirect``, если их не выставила политика.
    """
    # rest_framework.views читает настройки разрешений при импорте и
    # импортирует этот модуль через api.permissions.
    from rest_framework.views import exception_handler as drf_handler

    response = drf_handler(exc, context)
    if response is None:
        return response

    view = context.get('view')
    view_name = type(view).__name__ if view is not None else '-'

    if isinstance(exc, (LoginRequired, AccessDenied)):
        logger.info(
            f'Отказ в доступе ({exc.decision.reason.value}) '
            f'в {view_name}: {context["request"].method} '
            f'{context["request"].path}'
        )
        return response

    if not isinstance(response.data, dict):
        return response

    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        response.data.update(
            reason=DENY_UNAUTHENTICATED.reason.value,
            redirect=DENY_UNAUTHENTICATED.redirect,
        )
    elif isinstance(exc, PermissionDenied):
        response.data.update(
            reason=DENY_FORBIDDEN.reason.value,
            redirect=DENY_FORBIDDEN.redirect,
        )
    elif response.status_code == status.HTTP_404_NOT_FOUND:
        response.data.setdefault('reason', NOT_FOUND_REASON)
    return response
