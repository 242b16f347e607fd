"""
Модуль содержит представления (views) для API CookSecure.
Реализует CRUD-операции над рецептами, профили пользователей, избранное
и проверку сессии. Все решения о правах принимает ``access.policy`` через
разрешения из ``api.permissions``.
"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import Count
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from djoser.views import UserViewSet
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from access.policy import DENY_FORBIDDEN, Role
from access.session import subject_of
from api.exceptions import raise_for
from api.filters import RecipeFilter
from api.paginations import RecipeLimitOffsetPagination
from api.permissions import (IsAuthenticatedSubject, RecipeAccessPolicy,
                             resolve_request, role_required)
from api.serializers import (CookUserSerializer, RecipeReadSerializer,
                             RecipeShortSerializer, RecipeWriteSerializer,
                             SessionSerializer, TagSerializer,
                             UserRoleSerializer)
from recipes.models import Favorite, Recipe, Tag

logger = logging.getLogger(__name__)

User = get_user_model()


class SessionView(APIView):
    """
    Проверка сессии. Клиент вызывает её при загрузке, чтобы выйти из
    состояния Unresolved до любых решений о перенаправлении.
    """

    permission_classes = [AllowAny]

    def get(self, request):
        subject = subject_of(resolve_request(request))
        user = request.user if subject is not None else None
        return Response(SessionSerializer.for_subject(user, subject).data)


class CookUserViewSet(UserViewSet):
    """
    Представление для управления пользователями.
    Регистрация, профиль текущего пользователя, рецепты автора и смена
    роли администратором.
    """

    queryset = User.objects.all()
    serializer_class = CookUserSerializer

    @action(['get', 'put', 'patch'],
            detail=False,
            permission_classes=[IsAuthenticatedSubject])
    def me(self, request, *args, **kwargs):
        """Профиль текущего пользователя. Роль здесь только для чтения."""
        return super().me(request, *args, **kwargs)

    @action(
        detail=True,
        methods=['patch'],
        permission_classes=[role_required(Role.ADMIN)]
    )
    def role(self, request, *args, **kwargs):
        """Меняет роль другого пользователя. Только для администраторов."""
        user = get_object_or_404(User, pk=kwargs['id'])
        if user.pk == request.user.pk:
            # Свою роль не меняет никто, включая администратора.
            raise_for(DENY_FORBIDDEN)

        serializer = UserRoleSerializer(
            user, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        old_role = user.role
        serializer.save()
        logger.info(
            f'{request.user.username} изменил роль {user.username}: '
            f'{old_role} -> {user.role}'
        )
        return Response(serializer.data, status=status.HTTP_200_OK)

    @action(
        detail=True,
        methods=['get'],
        permission_classes=[AllowAny]
    )
    def recipes(self, request, *args, **kwargs):
        """Рецепты автора."""
        author = get_object_or_404(User, pk=kwargs['id'])
        paginator = RecipeLimitOffsetPagination()
        page = paginator.paginate_queryset(
            author.recipes.all(), request, view=self
        )
        serializer = RecipeShortSerializer(
            page, many=True, context={'request': request}
        )
        return paginator.get_paginated_response(serializer.data)


class TagViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Представление для модели Tag.
    Реализует только GET-запросы для получения списка тегов.
    """

    queryset = Tag.objects.all()
    serializer_class = TagSerializer
    permission_classes = [AllowAny]
    pagination_class = None


class RecipeViewSet(viewsets.ModelViewSet):
    """
    Представление для модели Recipe.
    Реализует CRUD-операции с рецептами, а также действия:
    - добавление/удаление в избранное
    - список избранного
    - список категорий
    """

    filter_backends = [
        DjangoFilterBackend,
        filters.OrderingFilter
    ]
    filterset_class = RecipeFilter
    ordering_fields = ('pub_date', 'title')
    permission_classes = (RecipeAccessPolicy,)
    pagination_class = RecipeLimitOffsetPagination

    def get_serializer_class(self):
        """Выбирает сериализатор в зависимости от HTTP-метода."""
        if self.request.method in ['POST', 'PUT', 'PATCH']:
            return RecipeWriteSerializer
        return RecipeReadSerializer

    def get_queryset(self):
        return Recipe.objects.select_related('author').prefetch_related(
            'tags', 'ingredients'
        )

    def perform_create(self, serializer):
        """Сохраняет рецепт с текущим пользователем в качестве автора."""
        recipe = serializer.save(author=self.request.user)
        logger.info(
            f'{self.request.user.username} создал рецепт {recipe.pk}'
        )

    def perform_destroy(self, instance):
        logger.info(
            f'{self.request.user.username} удалил рецепт {instance.pk}'
        )
        instance.delete()

    @action(
        detail=True,
        methods=['post', 'delete'],
        permission_classes=[IsAuthenticatedSubject]
    )
    def favorite(self, request, pk=None):
        """Добавляет/удаляет рецепт из избранного."""
        recipe = get_object_or_404(Recipe, pk=pk)

        if request.method == 'DELETE':
            get_object_or_404(
                Favorite,
                user=request.user,
                recipe=recipe
            ).delete()
            return Response(status=status.HTTP_204_NO_CONTENT)

        # для метода 'POST':
        _, created = Favorite.objects.get_or_create(
            user=request.user, recipe=recipe
        )
        if not created:
            raise ValidationError(
                f'Рецепт с id={recipe.id} уже добавлен в избранное.')

        return Response(
            RecipeShortSerializer(
                recipe,
                context={'request': request}
            ).data,
            status=status.HTTP_201_CREATED)

    @action(
        detail=False,
        methods=['get'],
        permission_classes=[IsAuthenticatedSubject]
    )
    def favorites(self, request):
        """Избранные рецепты текущего пользователя."""
        recipes = self.get_queryset().filter(favorites__user=request.user)
        page = self.paginate_queryset(recipes)
        serializer = RecipeReadSerializer(
            page, many=True, context={'request': request}
        )
        return self.get_paginated_response(serializer.data)

    @action(
        detail=False,
        methods=['get'],
        permission_classes=[AllowAny],
        pagination_class=None,
    )
    def categories(self, request):
        """Категории рецептов с количеством рецептов в каждой."""
        categories = (
            Recipe.objects.exclude(category='')
            .values('category')
            .annotate(recipes_count=Count('id'))
            .order_by('category')
        )
        return Response(list(categories))
