"""
Политика доступа CookSecure.

Единственное место, где принимаются решения о правах: кто может попасть на
защищённые страницы, кто может создавать рецепты и кто может менять или
удалять конкретный рецепт. Все функции чистые: не обращаются к базе, не
читают глобальное состояние и не выполняют перенаправлений, а только
возвращают решение.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Optional, Union

from access.exceptions import PolicyPreconditionError

LOGIN_ROUTE = '/login'
HOME_ROUTE = '/'


class Role(str, Enum):
    USER = 'user'
    CHEF = 'chef'
    ADMIN = 'admin'


# Гость обозначает отсутствие сессии и не бывает ролью субъекта.
GUEST = 'guest'

RECIPE_MANAGER_ROLES = frozenset({Role.CHEF, Role.ADMIN})


class Reason(str, Enum):
    UNAUTHENTICATED = 'unauthenticated'
    FORBIDDEN = 'forbidden'


DENY_MESSAGES = {
    Reason.UNAUTHENTICATED: 'Сначала войдите в систему.',
    Reason.FORBIDDEN: 'У вас нет прав для выполнения этого действия.',
}


@dataclass(frozen=True)
class Subject:
    """Аутентифицированный пользователь, каким его видит политика."""

    id: str
    role: Role

    def __post_init__(self):
        # ValueError для неизвестной роли.
        object.__setattr__(self, 'role', Role(self.role))
        object.__setattr__(self, 'id', str(self.id))


@dataclass(frozen=True)
class Resource:
    """Рецепт с единственным неизменяемым владельцем."""

    id: str
    owner_id: str

    def __post_init__(self):
        object.__setattr__(self, 'id', str(self.id))
        object.__setattr__(self, 'owner_id', str(self.owner_id))


class Allow:
    __slots__ = ()

    def __bool__(self):
        return True

    def __repr__(self):
        return 'Allow'


ALLOW = Allow()


@dataclass(frozen=True)
class Deny:
    reason: Reason
    redirect: str

    def __bool__(self):
        return False

    @property
    def message(self) -> str:
        return DENY_MESSAGES[self.reason]


Decision = Union[Allow, Deny]

DENY_UNAUTHENTICATED = Deny(Reason.UNAUTHENTICATED, LOGIN_ROUTE)
DENY_FORBIDDEN = Deny(Reason.FORBIDDEN, HOME_ROUTE)


def _subject(subject) -> Optional[Subject]:
    """
    Приводит переданный контекст к субъекту или ``None``.

    Принимает ``Subject``, ``None`` или состояние аутентификации из
    ``access.session``. Неопределённое состояние запрещено: решение о
    перенаправлении нельзя принимать, пока сессия не проверена.
    """
    if subject is None or isinstance(subject, Subject):
        return subject
    # Импорт здесь: session зависит от policy.
    from access.session import subject_of
    return subject_of(subject)


def _recipe(recipe) -> Resource:
    if recipe is None:
        raise PolicyPreconditionError(
            'Рецепт должен быть загружен до проверки прав на него.'
        )
    return recipe


def can_access_protected(subject) -> Decision:
    """Любая защищённая страница доступна любому вошедшему пользователю."""
    if _subject(subject) is None:
        return DENY_UNAUTHENTICATED
    return ALLOW


def can_access_role(subject, allowed_roles: AbstractSet) -> Decision:
    """
    Проверяет роль субъекта по точному вхождению в ``allowed_roles``.

    Иерархии ролей нет: администратор не получает доступ к разделу повара,
    если роль ``admin`` не перечислена явно. ``guest`` допустим в наборе,
    но не совпадает ни с одним субъектом.
    """
    allowed = {Role(role) for role in allowed_roles if role != GUEST}
    subject = _subject(subject)
    if subject is None:
        return DENY_UNAUTHENTICATED
    if subject.role not in allowed:
        return DENY_FORBIDDEN
    return ALLOW


def can_manage_recipes(subject) -> bool:
    subject = _subject(subject)
    return subject is not None and subject.role in RECIPE_MANAGER_ROLES


def can_edit_recipe(subject, recipe: Resource) -> bool:
    """
    Администратор может менять любой рецепт, повар только свой,
    обычный пользователь никакой.
    """
    subject = _subject(subject)
    recipe = _recipe(recipe)
    if subject is None:
        return False
    if subject.role == Role.ADMIN:
        return True
    return subject.role == Role.CHEF and recipe.owner_id == subject.id


# Удаление и редактирование разрешаются одним и тем же правилом.
can_delete_recipe = can_edit_recipe


def authorize_recipe_create(subject) -> Decision:
    if _subject(subject) is None:
        return DENY_UNAUTHENTICATED
    if not can_manage_recipes(subject):
        return DENY_FORBIDDEN
    return ALLOW


def authorize_recipe_change(subject, recipe: Resource) -> Decision:
    """Решение с перенаправлением для редактирования и удаления рецепта."""
    recipe = _recipe(recipe)
    if _subject(subject) is None:
        return DENY_UNAUTHENTICATED
    if not can_edit_recipe(subject, recipe):
        return DENY_FORBIDDEN
    return ALLOW
