import json

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from recipes.models import Recipe, Tag

from tests.test_normalizers import MEAL

pytestmark = pytest.mark.django_db


@pytest.fixture
def meals_file(tmp_path):
    path = tmp_path / 'meals.json'
    path.write_text(
        json.dumps({'meals': [MEAL, {'strMeal': 'Без номера'}]}),
        encoding='utf-8',
    )
    return path


def load(path, author):
    call_command('load_recipes', path=str(path), author=author.email)


def test_import_creates_recipes(meals_file, chef):
    load(meals_file, chef)

    recipe = Recipe.objects.get(external_id='52772')
    assert recipe.author == chef
    assert recipe.title == 'Teriyaki Chicken Casserole'
    assert [item.name for item in recipe.ingredients.all()] == [
        'soy sauce', 'water', 'brown sugar'
    ]
    assert set(recipe.tags.values_list('slug', flat=True)) == {
        'meat', 'casserole'
    }
    assert Recipe.objects.count() == 1


def test_reimport_updates_and_keeps_owner(meals_file, chef, admin_user):
    load(meals_file, chef)
    load(meals_file, admin_user)

    recipe = Recipe.objects.get(external_id='52772')
    assert Recipe.objects.count() == 1
    assert recipe.author == chef
    assert recipe.ingredients.count() == 3
    assert Tag.objects.count() == 2


def test_plain_user_cannot_import(meals_file, user):
    with pytest.raises(CommandError):
        load(meals_file, user)

    assert not Recipe.objects.exists()


def test_missing_file(tmp_path, chef):
    with pytest.raises(CommandError):
        load(tmp_path / 'nope.json', chef)


def test_broken_json(tmp_path, chef):
    path = tmp_path / 'broken.json'
    path.write_text('{"meals": [', encoding='utf-8')

    with pytest.raises(CommandError):
        load(path, chef)


def test_unknown_author(meals_file):
    with pytest.raises(CommandError):
        call_command(
            'load_recipes', path=str(meals_file), author='nobody@example.com'
        )


def test_tags_with_same_slug_share_one_tag(tmp_path, chef):
    path = tmp_path / 'tags.json'
    path.write_text(json.dumps([
        {'idMeal': '1', 'strMeal': 'Борщ', 'strTags': 'Soup'},
        {'idMeal': '2', 'strMeal': 'Уха', 'strTags': 'soup,SOUP'},
    ]), encoding='utf-8')

    load(path, chef)

    assert Recipe.objects.count() == 2
    assert list(Tag.objects.values_list('slug', flat=True)) == ['soup']
    for recipe in Recipe.objects.all():
        assert list(recipe.tags.values_list('slug', flat=True)) == ['soup']
