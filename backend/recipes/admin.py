from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count
from django.utils.html import format_html, format_html_join
from django.utils.safestring import mark_safe

from access.policy import can_delete_recipe, can_edit_recipe
from recipes.filters import (HasFavoritesFilter, HasRecipesFilter,
                             ImportedFilter)
from recipes.models import (CookUser, Favorite, Recipe, RecipeIngredient,
                            Tag)


@admin.register(CookUser)
class CookUserAdmin(BaseUserAdmin):
    list_display = [
        'id',
        'username',
        'full_name',
        'email',
        'role',
        'is_active',
        'recipe_count',
        'favorite_count',
    ]
    list_editable = ('is_active',)
    list_filter = [
        'role',
        'is_superuser',
        'is_staff',
        'is_active',
        HasRecipesFilter,
        HasFavoritesFilter,
    ]
    search_fields = ['username', 'email']
    search_help_text = 'Поиск по username и email'
    date_hierarchy = 'last_login'
    readonly_fields = ['last_login', 'date_joined']
    ordering = ('username',)
    fieldsets = [
        (
            'Основные сведения о пользователе',
            {
                'fields': [
                    ('username', 'is_active'),
                    'email',
                    ('first_name', 'last_name'),
                    'role',
                    ('is_superuser', 'is_staff'),
                    'password',
                ],
            },
        ),
        (
            'Дополнительная информация',
            {
                'description': 'Дополнительные сведения о пользователе.',
                'fields': [('last_login', 'date_joined')],
            },
        ),
        (
            'Группы и Полномочия',
            {
                'fields': ['groups', 'user_permissions'],
            },
        ),
    ]

    add_fieldsets = (
        (
            None,
            {
                'classes': ('wide',),
                'fields': (
                    'username',
                    'email',
                    'first_name',
                    'last_name',
                    'role',
                    'password1',
                    'password2',
                ),
            },
        ),
    )

    @admin.display(description='Имя фамилия')
    def full_name(self, user):
        """Получение полного имени"""
        return user.get_full_name()

    @admin.display(description='Рецептов')
    def recipe_count(self, user):
        return user.recipe_count

    @admin.display(description='В избранном')
    def favorite_count(self, user):
        return user.favorite_count

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            recipe_count=Count('recipes', distinct=True),
            favorite_count=Count('favorites', distinct=True),
        )


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'slug', 'recipe_count')
    search_fields = ('name', 'slug')
    list_display_links = ('name',)
    ordering = ('name',)
    readonly_fields = ('id',)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            recipe_count=Count('recipes')
        )

    @admin.display(description='Рецептов')
    def recipe_count(self, tag):
        return tag.recipe_count


class RecipeIngredientInline(admin.TabularInline):
    model = RecipeIngredient
    extra = 1


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    """
    Админка рецептов. Права на изменение и удаление конкретного рецепта
    проверяются той же политикой, что и в API: сотрудник с ролью chef
    видит чужие рецепты, но менять может только свои.
    """

    list_display = (
        'id',
        'title',
        'category',
        'area',
        'author',
        'favorites_count',
        'ingredients_list',
        'tags_list',
        'recipe_image',
    )
    search_fields = ('author__username', 'title')
    list_display_links = ('title',)
    list_filter = ('category', 'area', 'tags', ImportedFilter)
    date_hierarchy = 'pub_date'
    ordering = ('title',)
    readonly_fields = ('id', 'recipe_image', 'external_id')
    inlines = [RecipeIngredientInline]

    fieldsets = (
        (None, {
            'fields': (
                'title',
                'author',
                ('category', 'area'),
                'instructions',
                'image',
                'recipe_image',
                'youtube',
                'source',
                'external_id',
            )
        }),
        ('Теги', {
            'fields': ('tags',)
        }),
    )

    def get_queryset(self, request):
        queryset = super().get_queryset(request)
        return queryset.select_related('author').annotate(
            favorites_count=Count('favorites')
        )

    def get_readonly_fields(self, request, obj=None):
        # Владелец рецепта задаётся один раз при создании.
        if obj is not None:
            return (*self.readonly_fields, 'author')
        return self.readonly_fields

    def has_change_permission(self, request, obj=None):
        allowed = super().has_change_permission(request, obj)
        if obj is None or not allowed:
            return allowed
        return can_edit_recipe(request.user.as_subject(), obj.as_resource())

    def has_delete_permission(self, request, obj=None):
        allowed = super().has_delete_permission(request, obj)
        if obj is None or not allowed:
            return allowed
        return can_delete_recipe(
            request.user.as_subject(), obj.as_resource()
        )

    @admin.display(description='В избранном')
    def favorites_count(self, recipe):
        return recipe.favorites_count

    @admin.display(description='Изображение')
    def recipe_image(self, recipe):
        if recipe.image:
            return format_html(
                '<img src="{}" width="50" height="50">', recipe.image
            )
        return '-'

    @admin.display(description='Продукты')
    def ingredients_list(self, recipe):
        return format_html_join(
            mark_safe('<br>'), '{}',
            ((str(ingredient),) for ingredient in recipe.ingredients.all())
        )

    @admin.display(description='Теги')
    def tags_list(self, recipe):
        return format_html_join(
            mark_safe('<br>'), '{}',
            ((tag.name,) for tag in recipe.tags.all())
        )


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    search_fields = ('user__username', 'recipe__title')
    list_filter = ('user',)
    readonly_fields = ('id',)
    list_select_related = ('user', 'recipe')
    list_display = ('id', 'user_display', 'recipe_display')

    @admin.display(description='Пользователь')
    def user_display(self, obj):
        return obj.user.username

    @admin.display(description='Рецепт')
    def recipe_display(self, obj):
        return obj.recipe.title

    recipe_display.admin_order_field = 'recipe__title'
    user_display.admin_order_field = 'user__username'
