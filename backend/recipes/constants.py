NAME_MAX_LENGTH = 150
TEXT_FIELDS_DISPLAY_LENGTH = 20

USERNAME_MAX_LENGTH = 150
USERNAME_REGEX = r'^[\w.@+-]+\Z'
USERNAME_FORBIDDEN = ('me',)
EMAIL_MAX_LENGTH = 254
PASSWORD_MAX_LENGTH = 128

ROLE_MAX_LENGTH = 16

RECIPE_TITLE_MAX_LENGTH = 256
CATEGORY_MAX_LENGTH = 64
AREA_MAX_LENGTH = 64
EXTERNAL_ID_MAX_LENGTH = 32

TAG_MAX_LENGTH = 32
SLUG_MAX_LENGTH = 32
SLUG_REGEX = r'^[-a-zA-Z0-9_]+$'

INGREDIENT_MAX_LENGTH = 128
MEASURE_MAX_LENGTH = 64
# TheMealDB хранит до 20 пар strIngredientN / strMeasureN
MEALDB_INGREDIENT_SLOTS = 20

RECIPES_LIMIT_DEFAULT = 10
RECIPES_LIMIT_MAX = 100
