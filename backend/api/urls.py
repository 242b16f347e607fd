from django.urls import include, path
from rest_framework.routers import DefaultRouter

from api.views import CookUserViewSet, RecipeViewSet, SessionView, TagViewSet

router = DefaultRouter()
router.register('recipes', RecipeViewSet, basename='recipes')
router.register('tags', TagViewSet, basename='tags')
router.register('users', CookUserViewSet, basename='users')

urlpatterns = [
    path(
        'auth/',
        include('djoser.urls.authtoken'),
        name='api-token-auth'
    ),
    path('session/', SessionView.as_view(), name='session'),
    path('', include(router.urls)),
]
