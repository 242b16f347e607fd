"""
Командный менеджер для загрузки рецептов из JSON в формате TheMealDB.

python manage.py load_recipes --path=data/meals.json --author=chef@example.com
"""
import json
import logging
from pathlib import Path

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import IntegrityError, transaction
from django.utils.text import slugify

from access.policy import can_manage_recipes
from recipes.constants import SLUG_MAX_LENGTH, TAG_MAX_LENGTH
from recipes.models import Recipe, RecipeIngredient, Tag
from recipes.normalizers import normalize_recipe, unwrap_meals

logger = logging.getLogger(__name__)

User = get_user_model()


class Command(BaseCommand):
    help = 'Импорт рецептов из JSON-файла (TheMealDB или формат сайта)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--path',
            type=str,
            default=str(Path(settings.BASE_DIR).parent / 'data' / 'meals.json'),
            help='Путь к JSON-файлу с рецептами'
        )
        parser.add_argument(
            '--author',
            type=str,
            required=True,
            help='Email автора, которому будут принадлежать рецепты'
        )

    def handle(self, *args, **kwargs):
        file_path = Path(kwargs['path'])

        try:
            author = User.objects.get(email=kwargs['author'])
        except User.DoesNotExist:
            raise CommandError(f'Пользователь {kwargs["author"]} не найден')

        if not can_manage_recipes(author.as_subject()):
            raise CommandError(
                f'Пользователь {author.username} не может публиковать '
                'рецепты: нужна роль chef или admin'
            )

        try:
            with open(file_path, encoding='utf-8') as file:
                meals = unwrap_meals(json.load(file))
        except FileNotFoundError:
            raise CommandError(f'Файл {file_path} не найден')
        except (json.JSONDecodeError, ValueError) as e:
            raise CommandError(f'Ошибка при чтении JSON файла: {e}')

        created_count = 0
        updated_count = 0
        skipped_count = 0

        for payload in meals:
            try:
                recipe_data = normalize_recipe(payload)
            except ValueError as e:
                logger.warning(f'Пропущена запись: {e}')
                self.stderr.write(self.style.WARNING(f'Пропущена запись: {e}'))
                skipped_count += 1
                continue

            try:
                with transaction.atomic():
                    _, created = self.save_recipe(recipe_data, author)
            except IntegrityError as e:
                logger.warning(
                    f'Пропущен рецепт {recipe_data["id"]}: {e}'
                )
                self.stderr.write(self.style.WARNING(
                    f'Пропущен рецепт {recipe_data["id"]}: {e}'
                ))
                skipped_count += 1
                continue
            if created:
                created_count += 1
            else:
                updated_count += 1

        logger.info(
            f'Импорт из {file_path}: {created_count} новых, '
            f'{updated_count} обновленных, {skipped_count} пропущено'
        )
        self.stdout.write(self.style.SUCCESS(
            f'Успешно обработано: {created_count} новых, '
            f'{updated_count} обновленных рецептов, '
            f'{skipped_count} пропущено'
        ))

    def save_recipe(self, data, author):
        recipe, created = Recipe.objects.get_or_create(
            external_id=data['id'],
            defaults={'author': author, 'title': data['title']},
        )
        # Владелец существующего рецепта не меняется при повторном импорте.
        for field in ('title', 'category', 'area', 'instructions',
                      'image', 'youtube', 'source'):
            setattr(recipe, field, data[field])
        recipe.save()

        recipe.tags.set(self.get_tags(data['tags']))
        recipe.ingredients.all().delete()
        RecipeIngredient.objects.bulk_create(
            RecipeIngredient(
                recipe=recipe,
                name=item['name'],
                measure=item['measure'],
                position=position,
            )
            for position, item in enumerate(data['ingredients'])
        )
        return recipe, created

    def get_tags(self, names):
        tags = []
        for name in names:
            name = name[:TAG_MAX_LENGTH]
            slug = slugify(name)[:SLUG_MAX_LENGTH] or name[:SLUG_MAX_LENGTH]
            # Имя и слаг уникальны: "Soup" и "soup" дают один тег.
            tag = (
                Tag.objects.filter(name=name).first()
                or Tag.objects.filter(slug=slug).first()
                or Tag.objects.create(name=name, slug=slug)
            )
            if tag not in tags:
                tags.append(tag)
        return tags
