"""
Модуль содержит пользовательские разрешения (permissions) для Django REST
Framework.

Разрешения не проверяют роли сами: они восстанавливают состояние
аутентификации запроса, передают его в ``access.policy`` и превращают отказ
в ответ API. Ресурс (рецепт) к этому моменту уже загружен: если его нет,
DRF отвечает 404 до вызова ``has_object_permission``.
"""
from rest_framework import permissions
from rest_framework.permissions import SAFE_METHODS

from access import session
from access.policy import (authorize_recipe_change, authorize_recipe_create,
                           can_access_protected, can_access_role)
from api.exceptions import raise_for


def subject_for(user):
    """Субъект политики для пользователя Django или None для гостя."""
    if user is None or not user.is_authenticated:
        return None
    return user.as_subject()


def resolve_request(request):
    """
    Состояние аутентификации запроса: ``Authenticated`` или ``ANONYMOUS``.

    Пользователя запроса уже загрузила ``SessionTokenAuthentication``; здесь
    он только переводится в субъекта политики.
    """
    return session.resolve(getattr(request, 'user', None), subject_for)


class IsAuthenticatedSubject(permissions.BasePermission):
    """Доступ для любого вошедшего пользователя, независимо от роли."""

    def has_permission(self, request, view):
        return raise_for(can_access_protected(resolve_request(request)))


class HasRole(permissions.BasePermission):
    """
    Доступ только для перечисленных ролей, по точному совпадению.
    Используйте через ``role_required``.
    """

    allowed_roles = frozenset()

    def has_permission(self, request, view):
        return raise_for(
            can_access_role(resolve_request(request), self.allowed_roles)
        )


def role_required(*roles):
    """Создаёт класс разрешения для заданного набора ролей."""
    return type(
        'HasRole_' + '_'.join(str(getattr(role, 'value', role))
                              for role in roles),
        (HasRole,),
        {'allowed_roles': frozenset(roles)},
    )


class RecipeAccessPolicy(permissions.BasePermission):
    """
    Разрешение для рецептов: читать могут все, создавать повара и
    администраторы, менять и удалять автор-повар или администратор.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        state = resolve_request(request)
        if getattr(view, 'action', None) == 'create':
            return raise_for(authorize_recipe_create(state))
        return raise_for(can_access_protected(state))

    def has_object_permission(self, request, view, obj):
        """
        Проверяет, может ли текущий пользователь изменить или удалить
        конкретный рецепт.

        :param request: Объект HTTP-запроса.
        :param view: Представление, вызывающее данный метод.
        :param obj: Уже загруженный рецепт.
        :return: True, если доступ разрешён, иначе исключение API.
        """
        if request.method in SAFE_METHODS:
            return True
        return raise_for(
            authorize_recipe_change(resolve_request(request),
                                    obj.as_resource())
        )
