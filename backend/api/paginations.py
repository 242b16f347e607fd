from rest_framework.pagination import LimitOffsetPagination

from recipes.constants import RECIPES_LIMIT_DEFAULT, RECIPES_LIMIT_MAX


class RecipeLimitOffsetPagination(LimitOffsetPagination):
    """Пагинация списков рецептов: ?limit=&offset=."""
    default_limit = RECIPES_LIMIT_DEFAULT
    max_limit = RECIPES_LIMIT_MAX
