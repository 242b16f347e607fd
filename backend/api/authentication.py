"""
Аутентификация по токену через ``access.session``.

Неизвестный токен или токен неактивного пользователя означает отсутствие
сессии, а не ошибку: запрос продолжается как гостевой, публичные страницы
остаются доступны, а защищённые отвечают 401 уже от разрешений.
"""
from django.core.exceptions import ObjectDoesNotExist
from rest_framework.authentication import TokenAuthentication

from access import session

RESOLUTION_ERRORS = session.RESOLUTION_ERRORS + (ObjectDoesNotExist,)


class SessionTokenAuthentication(TokenAuthentication):
    """``TokenAuthentication``, где поиск токена проходит через ``resolve``."""

    def authenticate_credentials(self, key):
        found = {}

        def resolve_subject(ref):
            token = self.get_model().objects.select_related('user').get(
                key=ref
            )
            found['token'] = token
            return token.user.as_subject()

        state = session.resolve(key, resolve_subject, errors=RESOLUTION_ERRORS)
        if session.subject_of(state) is None:
            return None
        token = found['token']
        return token.user, token
