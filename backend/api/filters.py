"""
Модуль содержит пользовательские фильтры для Django REST Framework.
Используется для фильтрации списка рецептов.
"""

from django_filters import rest_framework as filters

from recipes.models import Recipe, Tag


class RecipeFilter(filters.FilterSet):
    """
    Фильтр для модели Recipe. Позволяет фильтровать рецепты по:
    - category, area: категория и кухня без учёта регистра.
    - author: ID автора.
    - tags: slug тегов (можно передать несколько).
    - search: подстрока в названии.
    - is_favorited: рецепты из избранного текущего пользователя.
    - mine: рецепты текущего пользователя.
    """

    category = filters.CharFilter(field_name='category', lookup_expr='iexact')
    area = filters.CharFilter(field_name='area', lookup_expr='iexact')
    author = filters.NumberFilter(
        field_name='author__id',
        lookup_expr='exact'
    )
    tags = filters.ModelMultipleChoiceFilter(
        queryset=Tag.objects.all(),
        field_name='tags__slug',
        to_field_name='slug',
    )
    search = filters.CharFilter(field_name='title', lookup_expr='icontains')
    is_favorited = filters.BooleanFilter(method='filter_is_favorited')
    mine = filters.BooleanFilter(method='filter_mine')

    class Meta:
        model = Recipe
        fields = ['category', 'area', 'author', 'tags', 'search',
                  'is_favorited', 'mine']

    def _user(self):
        user = getattr(self.request, 'user', None)
        if user is not None and user.is_authenticated:
            return user
        return None

    def filter_is_favorited(self, recipes, name, value):
        """
        Фильтрует рецепты, которые находятся в избранном у текущего
        пользователя. Гостю при value=True ничего не возвращается.

        :param recipes: QuerySet рецептов.
        :param name: Имя фильтра (в данном случае 'is_favorited').
        :param value: Логическое значение True/False.
        :return: Отфильтрованный QuerySet.
        """
        if not value:
            return recipes
        user = self._user()
        if user is None:
            return recipes.none()
        return recipes.filter(favorites__user=user)

    def filter_mine(self, recipes, name, value):
        if not value:
            return recipes
        user = self._user()
        if user is None:
            return recipes.none()
        return recipes.filter(author=user)

    def filter_queryset(self, recipes):
        recipes = super().filter_queryset(recipes)
        # Несколько тегов дают дубли строк.
        return recipes.distinct()
