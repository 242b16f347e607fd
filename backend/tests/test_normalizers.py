import pytest

from recipes.normalizers import normalize_recipe, split_tags, unwrap_meals

MEAL = {
    'idMeal': '52772',
    'strMeal': 'Teriyaki Chicken Casserole',
    'strCategory': 'Chicken',
    'strArea': 'Japanese',
    'strInstructions': 'Preheat oven to 350 degrees.',
    'strMealThumb': 'https://www.themealdb.com/images/media/meals/1.jpg',
    'strTags': 'Meat, Casserole,Meat',
    'strYoutube': 'https://www.youtube.com/watch?v=4aZr5hZXP_s',
    'strIngredient1': 'soy sauce',
    'strMeasure1': '3/4 cup',
    'strIngredient2': ' water ',
    'strMeasure2': None,
    'strIngredient3': '',
    'strMeasure3': ' ',
    'strIngredient4': 'brown sugar',
    'strMeasure4': '1/2 cup',
    'strSource': None,
}


def test_mealdb_payload_is_mapped():
    recipe = normalize_recipe(MEAL)

    assert recipe['id'] == '52772'
    assert recipe['title'] == 'Teriyaki Chicken Casserole'
    assert recipe['category'] == 'Chicken'
    assert recipe['area'] == 'Japanese'
    assert recipe['source'] == ''
    assert 'idMeal' not in recipe
    assert recipe['tags'] == ['Meat', 'Casserole']


def test_mealdb_ingredients_skip_empty_slots():
    assert normalize_recipe(MEAL)['ingredients'] == [
        {'name': 'soy sauce', 'measure': '3/4 cup'},
        {'name': 'water', 'measure': ''},
        {'name': 'brown sugar', 'measure': '1/2 cup'},
    ]


def test_site_payload_keeps_canonical_shape():
    recipe = normalize_recipe({
        'id': 17,
        'title': 'Сырники',
        'category': 'Breakfast',
        'tags': ['Завтрак'],
        'ingredients': ['Творог', {'name': 'Мука', 'measure': '2 ст. л.'}],
    })

    assert recipe['id'] == '17'
    assert recipe['instructions'] == ''
    assert recipe['ingredients'] == [
        {'name': 'Творог', 'measure': ''},
        {'name': 'Мука', 'measure': '2 ст. л.'},
    ]
    assert set(recipe) == set(normalize_recipe(MEAL))


@pytest.mark.parametrize('payload', [
    {'strMeal': 'Без номера'},
    {'idMeal': '1', 'strMeal': '  '},
    {'title': 'Без номера'},
    ['idMeal', '1'],
])
def test_invalid_payload_rejected(payload):
    with pytest.raises(ValueError):
        normalize_recipe(payload)


def test_split_tags():
    assert split_tags(None) == []
    assert split_tags('') == []
    assert split_tags(' a,b ,,a') == ['a', 'b']


def test_unwrap_meals():
    assert unwrap_meals({'meals': [MEAL]}) == [MEAL]
    assert unwrap_meals({'meals': None}) == []
    assert unwrap_meals([MEAL]) == [MEAL]
    with pytest.raises(ValueError):
        unwrap_meals('meals')
