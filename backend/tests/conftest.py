import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from recipes.models import Recipe, RecipeIngredient, Tag

User = get_user_model()

PASSWORD = 'Sup3r-secret-pa55'


def make_user(username, role):
    return User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password=PASSWORD,
        first_name=username.title(),
        role=role,
    )


def make_recipe(author, title='Борщ', **extra):
    recipe = Recipe.objects.create(
        author=author,
        title=title,
        category=extra.pop('category', 'Soup'),
        instructions=extra.pop('instructions', 'Варить два часа.'),
        **extra,
    )
    RecipeIngredient.objects.create(
        recipe=recipe, name='Свёкла', measure='2 шт', position=0
    )
    return recipe


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return make_user('plain', 'user')


@pytest.fixture
def chef(db):
    return make_user('chef', 'chef')


@pytest.fixture
def other_chef(db):
    return make_user('rival', 'chef')


@pytest.fixture
def admin_user(db):
    return make_user('boss', 'admin')


@pytest.fixture
def client_for():
    def _client_for(account):
        client = APIClient()
        client.force_authenticate(user=account)
        return client
    return _client_for


@pytest.fixture
def tag(db):
    return Tag.objects.create(name='Суп', slug='soup')


@pytest.fixture
def chef_recipe(chef):
    return make_recipe(chef)


@pytest.fixture
def rival_recipe(other_chef):
    return make_recipe(other_chef, title='Пельмени', category='Beef')
