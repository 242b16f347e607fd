from django.contrib.auth import get_user_model
from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models

from access.policy import Resource, Role, Subject
from recipes.constants import (AREA_MAX_LENGTH, CATEGORY_MAX_LENGTH,
                               EMAIL_MAX_LENGTH, EXTERNAL_ID_MAX_LENGTH,
                               INGREDIENT_MAX_LENGTH, MEASURE_MAX_LENGTH,
                               NAME_MAX_LENGTH, RECIPE_TITLE_MAX_LENGTH,
                               ROLE_MAX_LENGTH, SLUG_MAX_LENGTH,
                               TAG_MAX_LENGTH, TEXT_FIELDS_DISPLAY_LENGTH,
                               USERNAME_MAX_LENGTH)
from recipes.validators import slug_validator, username_validator


class CookUserManager(UserManager):

    def create_superuser(self, username, email=None, password=None,
                         **extra_fields):
        extra_fields.setdefault('role', Role.ADMIN.value)
        return super().create_superuser(
            username, email, password, **extra_fields
        )


class CookUser(AbstractUser):
    """Пользователь с ролью: user, chef или admin."""

    class Roles(models.TextChoices):
        USER = Role.USER.value, 'Пользователь'
        CHEF = Role.CHEF.value, 'Повар'
        ADMIN = Role.ADMIN.value, 'Администратор'

    username = models.CharField(
        'Никнейм',
        max_length=USERNAME_MAX_LENGTH,
        unique=True,
        validators=[username_validator],
    )
    email = models.EmailField(
        'Адрес электронной почты',
        unique=True,
        blank=False,
        max_length=EMAIL_MAX_LENGTH,
    )
    first_name = models.CharField(
        'Имя',
        blank=False,
        max_length=NAME_MAX_LENGTH,
    )
    last_name = models.CharField(
        'Фамилия',
        blank=True,
        max_length=NAME_MAX_LENGTH,
    )
    role = models.CharField(
        'Роль',
        max_length=ROLE_MAX_LENGTH,
        choices=Roles.choices,
        default=Roles.USER,
    )

    objects = CookUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username', 'first_name']

    class Meta:
        verbose_name = 'пользователь'
        verbose_name_plural = 'Пользователи'
        ordering = ('username',)

    def __str__(self):
        return self.username

    def as_subject(self):
        """
        Субъект политики доступа для этого пользователя.
        Неактивный пользователь равнозначен отсутствию сессии.
        """
        if not self.is_active:
            return None
        return Subject(id=str(self.pk), role=self.role)


class Tag(models.Model):
    """
    Модель для хранения тегов рецептов
    """
    name = models.CharField(
        'Наименование',
        max_length=TAG_MAX_LENGTH,
        unique=True,
    )
    slug = models.SlugField(
        verbose_name='Слаг',
        max_length=SLUG_MAX_LENGTH,
        unique=True,
        validators=[slug_validator],
    )

    class Meta:
        verbose_name = 'тег'
        verbose_name_plural = 'Теги'
        ordering = ('name',)

    def __str__(self):
        return self.name


UserModel = get_user_model()


class Recipe(models.Model):
    title = models.CharField(
        'Название рецепта',
        max_length=RECIPE_TITLE_MAX_LENGTH,
    )
    category = models.CharField(
        'Категория',
        max_length=CATEGORY_MAX_LENGTH,
        blank=True,
        db_index=True,
    )
    area = models.CharField(
        'Кухня',
        max_length=AREA_MAX_LENGTH,
        blank=True,
    )
    instructions = models.TextField(
        'Инструкции',
    )
    image = models.URLField(
        'Изображение',
        blank=True,
    )
    youtube = models.URLField(
        'Видео',
        blank=True,
    )
    source = models.URLField(
        'Источник',
        blank=True,
    )
    author = models.ForeignKey(
        UserModel,
        on_delete=models.CASCADE,
        verbose_name='Автор рецепта',
    )
    tags = models.ManyToManyField(
        Tag,
        verbose_name='Теги',
        blank=True,
    )
    external_id = models.CharField(
        'Идентификатор TheMealDB',
        max_length=EXTERNAL_ID_MAX_LENGTH,
        unique=True,
        null=True,
        blank=True,
    )
    pub_date = models.DateTimeField(
        'Дата и время публикации',
        auto_now_add=True,
    )
    modified = models.DateTimeField(
        'Дата изменения',
        auto_now=True,
    )

    class Meta:
        verbose_name = 'рецепт'
        verbose_name_plural = 'Рецепты'
        ordering = ('-pub_date', '-id')
        default_related_name = 'recipes'

    def __str__(self) -> str:
        return self.title[:TEXT_FIELDS_DISPLAY_LENGTH]

    def as_resource(self) -> Resource:
        return Resource(id=str(self.pk), owner_id=str(self.author_id))


class RecipeIngredient(models.Model):
    """Строка ингредиента: название и свободная мера («2 tbsp»)."""

    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        verbose_name='Рецепт',
    )
    name = models.CharField(
        'Продукт',
        max_length=INGREDIENT_MAX_LENGTH,
    )
    measure = models.CharField(
        'Количество',
        max_length=MEASURE_MAX_LENGTH,
        blank=True,
    )
    position = models.PositiveSmallIntegerField(
        'Порядок',
        default=0,
    )

    class Meta:
        ordering = ('recipe', 'position', 'id')
        verbose_name = 'продукт рецепта'
        verbose_name_plural = 'Продукты рецептов'
        default_related_name = 'ingredients'

    def __str__(self) -> str:
        return f'{self.name} {self.measure}'.strip()


class Favorite(models.Model):
    """Модель для избранных рецептов."""

    user = models.ForeignKey(
        UserModel,
        verbose_name='Пользователь',
        on_delete=models.CASCADE
    )
    recipe = models.ForeignKey(
        Recipe,
        verbose_name='Рецепт',
        on_delete=models.CASCADE
    )

    class Meta:
        verbose_name = 'избранный рецепт'
        verbose_name_plural = 'Избранные рецепты'
        default_related_name = 'favorites'
        ordering = ('user', 'recipe')
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'recipe'],
                name='unique_favorite_user_recipe'
            )
        ]

    def __str__(self):
        return (f'{self.user.username[:TEXT_FIELDS_DISPLAY_LENGTH]} '
                f'- {self.recipe.title[:TEXT_FIELDS_DISPLAY_LENGTH]}')
