from django.contrib.admin import SimpleListFilter


class BaseHasFilter(SimpleListFilter):
    """Базовый класс для фильтров наличия связанных объектов"""

    LOOKUP_CHOICES = [
        ('yes', 'Да'),
        ('no', 'Нет'),
    ]

    def lookups(self, request, model_admin):
        return self.LOOKUP_CHOICES

    def queryset(self, request, queryset):
        if self.value() == 'yes':
            return (queryset.
                    filter(**{f'{self.related_name}__isnull': False})
                    .distinct()
                    )
        if self.value() == 'no':
            return queryset.filter(**{f'{self.related_name}__isnull': True})
        return queryset


class HasRecipesFilter(BaseHasFilter):
    title = 'Есть рецепты'
    parameter_name = 'has_recipes'
    related_name = 'recipes'


class HasFavoritesFilter(BaseHasFilter):
    title = 'Есть избранное'
    parameter_name = 'has_favorites'
    related_name = 'favorites'


class ImportedFilter(SimpleListFilter):
    """Рецепты, загруженные из TheMealDB, и созданные на сайте."""

    title = 'Источник'
    parameter_name = 'imported'

    def lookups(self, request, model_admin):
        return [
            ('mealdb', 'TheMealDB'),
            ('site', 'Созданы на сайте'),
        ]

    def queryset(self, request, queryset):
        if self.value() == 'mealdb':
            return queryset.filter(external_id__isnull=False)
        if self.value() == 'site':
            return queryset.filter(external_id__isnull=True)
        return queryset
