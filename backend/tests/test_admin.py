import pytest
from django.contrib.admin.sites import site
from django.contrib.auth import get_user_model
from django.test import RequestFactory

from recipes.admin import RecipeAdmin
from recipes.models import Recipe

from tests.conftest import PASSWORD, make_recipe

User = get_user_model()

pytestmark = pytest.mark.django_db


@pytest.fixture
def staff_chef(db):
    return User.objects.create_superuser(
        username='staffchef',
        email='staffchef@example.com',
        password=PASSWORD,
        first_name='Staff',
        role='chef',
    )


@pytest.fixture
def recipe_admin():
    return RecipeAdmin(Recipe, site)


def admin_request(account, params=None):
    request = RequestFactory().get('/admin/recipes/recipe/', params or {})
    request.user = account
    return request


def test_superuser_defaults_to_admin_role():
    account = User.objects.create_superuser(
        username='root', email='root@example.com', password=PASSWORD,
        first_name='Root',
    )

    assert account.role == 'admin'


def test_staff_chef_changes_only_own_recipes(recipe_admin, staff_chef,
                                             rival_recipe):
    own = make_recipe(staff_chef)
    request = admin_request(staff_chef)

    assert recipe_admin.has_change_permission(request, own)
    assert recipe_admin.has_delete_permission(request, own)
    assert not recipe_admin.has_change_permission(request, rival_recipe)
    assert not recipe_admin.has_delete_permission(request, rival_recipe)


def test_author_is_read_only_after_creation(recipe_admin, staff_chef,
                                            chef_recipe):
    request = admin_request(staff_chef)

    assert 'author' in recipe_admin.get_readonly_fields(request, chef_recipe)
    assert 'author' not in recipe_admin.get_readonly_fields(request)


@pytest.mark.parametrize('value, titles', [
    ('mealdb', ['Импорт']),
    ('site', ['Борщ']),
])
def test_imported_filter(recipe_admin, staff_chef, chef, value, titles):
    make_recipe(chef)
    make_recipe(chef, title='Импорт', external_id='52772')
    request = admin_request(staff_chef, {'imported': value})

    changelist = recipe_admin.get_changelist_instance(request)

    assert list(changelist.queryset.values_list('title', flat=True)) == titles
