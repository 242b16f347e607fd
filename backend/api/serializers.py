from collections import Counter

from django.contrib.auth import get_user_model
from djoser.serializers import UserCreateSerializer as DjoserCreateSerializer
from djoser.serializers import UserSerializer as DjoserUserSerializer
from rest_framework import serializers

from access.policy import (Role, can_delete_recipe, can_edit_recipe,
                           can_manage_recipes)
from api.permissions import subject_for
from recipes.models import Favorite, Recipe, RecipeIngredient, Tag
from recipes.validators import self_assignable_role_validator

User = get_user_model()

USER_FIELDS = ('id', 'email', 'username', 'first_name', 'last_name', 'role')


class CookUserSerializer(DjoserUserSerializer):
    """Профиль пользователя. Роль свою изменить нельзя."""

    class Meta:
        model = User
        fields = USER_FIELDS
        read_only_fields = ('id', 'role')


class CookUserCreateSerializer(DjoserCreateSerializer):
    role = serializers.ChoiceField(
        choices=User.Roles.choices,
        default=Role.USER.value,
        validators=[self_assignable_role_validator],
    )

    class Meta:
        model = User
        fields = (*USER_FIELDS, 'password')


class UserRoleSerializer(serializers.ModelSerializer):
    """Смена роли пользователя администратором."""

    class Meta:
        model = User
        fields = ('id', 'username', 'role')
        read_only_fields = ('id', 'username')


class SessionSerializer(serializers.Serializer):
    """Итог проверки сессии для клиента, который ещё в Unresolved."""

    state = serializers.CharField()
    user = CookUserSerializer(required=False)
    permissions = serializers.DictField(
        child=serializers.BooleanField(), required=False
    )

    @classmethod
    def for_subject(cls, user, subject):
        if subject is None:
            return cls({'state': 'anonymous'})
        return cls({
            'state': 'authenticated',
            'user': user,
            'permissions': {
                'can_manage_recipes': can_manage_recipes(subject),
                'is_admin': subject.role == Role.ADMIN,
            },
        })


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ('id', 'name', 'slug')


class RecipeIngredientSerializer(serializers.ModelSerializer):
    class Meta:
        model = RecipeIngredient
        fields = ('name', 'measure')


class RecipeReadSerializer(serializers.ModelSerializer):
    tags = TagSerializer(many=True)
    author = CookUserSerializer()
    ingredients = RecipeIngredientSerializer(many=True)
    is_favorited = serializers.SerializerMethodField()
    can_edit = serializers.SerializerMethodField()
    can_delete = serializers.SerializerMethodField()

    class Meta:
        model = Recipe
        fields = (
            'id',
            'title',
            'category',
            'area',
            'instructions',
            'image',
            'youtube',
            'source',
            'tags',
            'ingredients',
            'author',
            'is_favorited',
            'can_edit',
            'can_delete',
            'pub_date',
            'modified',
        )
        read_only_fields = fields

    def _user(self):
        request = self.context.get('request')
        return getattr(request, 'user', None)

    def get_is_favorited(self, recipe):
        """Проверить наличие рецепта в избранном."""
        user = self._user()
        if user is None or not user.is_authenticated:
            return False
        return Favorite.objects.filter(user=user, recipe=recipe).exists()

    def get_can_edit(self, recipe):
        return can_edit_recipe(subject_for(self._user()), recipe.as_resource())

    def get_can_delete(self, recipe):
        return can_delete_recipe(
            subject_for(self._user()), recipe.as_resource()
        )


class RecipeShortSerializer(serializers.ModelSerializer):
    class Meta:
        model = Recipe
        fields = ('id', 'title', 'category', 'area', 'image')
        read_only_fields = fields


class RecipeWriteSerializer(serializers.ModelSerializer):
    """
    Создание и изменение рецепта. Поля автора здесь нет: автор задаётся
    при создании и никогда не переназначается.
    """

    ingredients = RecipeIngredientSerializer(
        many=True,
        required=True,
        label='Продукты',
    )
    tags = serializers.SlugRelatedField(
        slug_field='slug',
        queryset=Tag.objects.all(),
        many=True,
        required=False,
        label='Теги',
    )

    class Meta:
        model = Recipe
        fields = (
            'title',
            'category',
            'area',
            'instructions',
            'image',
            'youtube',
            'source',
            'tags',
            'ingredients',
        )

    def validate(self, data):
        request_method = self.context['request'].method

        if request_method in ('POST', 'PUT') and 'ingredients' not in data:
            raise serializers.ValidationError(
                {'ingredients': 'Это поле обязательно.'})
        return data

    def validate_ingredients(self, ingredients):
        errors = []

        if not ingredients:
            errors.append('Список продуктов не может быть пустым')

        duplicates = sorted(
            name for name, count in
            Counter(item['name'].strip().lower()
                    for item in ingredients).items()
            if count > 1
        )
        if duplicates:
            errors.append(f'Дублируются продукты: {", ".join(duplicates)}')

        if errors:
            raise serializers.ValidationError(errors)
        return ingredients

    def validate_tags(self, tags):
        duplicate_slugs = sorted(
            tag.slug for tag, count in Counter(tags).items() if count > 1
        )
        if duplicate_slugs:
            raise serializers.ValidationError(
                f'Повторяются теги: {", ".join(duplicate_slugs)}'
            )
        return tags

    def create_ingredients(self, ingredients, recipe):
        RecipeIngredient.objects.bulk_create(
            RecipeIngredient(
                recipe=recipe,
                name=item['name'].strip(),
                measure=item.get('measure', '').strip(),
                position=position,
            )
            for position, item in enumerate(ingredients)
        )

    def create(self, validated_data):
        tags = validated_data.pop('tags', [])
        ingredients = validated_data.pop('ingredients')
        recipe = super().create(validated_data)
        recipe.tags.set(tags)
        self.create_ingredients(ingredients, recipe)
        return recipe

    def update(self, instance, validated_data):
        ingredients = validated_data.pop('ingredients', None)
        tags = validated_data.pop('tags', None)

        if ingredients is not None:
            instance.ingredients.all().delete()
            self.create_ingredients(ingredients, instance)

        if tags is not None:
            instance.tags.set(tags)

        return super().update(instance, validated_data)

    def to_representation(self, instance):
        return RecipeReadSerializer(
            instance,
            context=self.context
        ).data
