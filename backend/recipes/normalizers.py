"""
Приведение рецептов из внешних источников к одному виду.

TheMealDB отдаёт рецепты с полями ``idMeal``, ``strMeal`` и парами
``strIngredientN``/``strMeasureN``, а рецепты, созданные на сайте, уже имеют
``id``, ``title`` и список ``ingredients``. Дальше этой границы рецепт
существует только в каноническом виде с единственным полем ``id``.
"""
from recipes.constants import MEALDB_INGREDIENT_SLOTS

MEALDB_FIELDS = {
    'idMeal': 'id',
    'strMeal': 'title',
    'strCategory': 'category',
    'strArea': 'area',
    'strInstructions': 'instructions',
    'strMealThumb': 'image',
    'strYoutube': 'youtube',
    'strSource': 'source',
}


def _clean(value):
    if value is None:
        return ''
    return str(value).strip()


def split_tags(raw):
    """Теги строкой через запятую или списком -> список без повторов."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(',')
    tags = []
    for tag in raw:
        tag = _clean(tag)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _mealdb_ingredients(payload):
    ingredients = []
    for slot in range(1, MEALDB_INGREDIENT_SLOTS + 1):
        name = _clean(payload.get(f'strIngredient{slot}'))
        if not name:
            continue
        ingredients.append({
            'name': name,
            'measure': _clean(payload.get(f'strMeasure{slot}')),
        })
    return ingredients


def _canonical_ingredients(items):
    ingredients = []
    for item in items or []:
        if isinstance(item, str):
            item = {'name': item}
        name = _clean(item.get('name'))
        if name:
            ingredients.append({
                'name': name,
                'measure': _clean(item.get('measure')),
            })
    return ingredients


def is_mealdb_payload(payload):
    return 'idMeal' in payload or 'strMeal' in payload


def normalize_recipe(payload):
    """
    Возвращает рецепт в каноническом виде.

    :param payload: Словарь рецепта в формате TheMealDB или сайта.
    :return: Словарь с ключами id, title, category, area, instructions,
        image, youtube, source, tags, ingredients.
    :raises ValueError: Если у рецепта нет идентификатора или названия.
    """
    if not isinstance(payload, dict):
        raise ValueError(f'Рецепт должен быть объектом, получено: {payload!r}')

    if is_mealdb_payload(payload):
        recipe = {
            canonical: _clean(payload.get(source))
            for source, canonical in MEALDB_FIELDS.items()
        }
        recipe['tags'] = split_tags(payload.get('strTags'))
        recipe['ingredients'] = _mealdb_ingredients(payload)
    else:
        recipe = {
            canonical: _clean(payload.get(canonical))
            for canonical in MEALDB_FIELDS.values()
        }
        recipe['tags'] = split_tags(payload.get('tags'))
        recipe['ingredients'] = _canonical_ingredients(
            payload.get('ingredients')
        )

    if not recipe['id']:
        raise ValueError('У рецепта нет идентификатора (id или idMeal)')
    if not recipe['title']:
        raise ValueError(f'У рецепта {recipe["id"]} нет названия')
    return recipe


def unwrap_meals(data):
    """Список рецептов из файла: голый список или конверт {"meals": [...]}."""
    if isinstance(data, dict):
        data = data.get('meals') or []
    if not isinstance(data, list):
        raise ValueError('Ожидался список рецептов')
    return data
