from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="GameCategory",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100, unique=True)),
                ("created_on", models.DateTimeField(auto_now_add=True)),
                ("updated_on", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "game categories",
            },
        ),
        migrations.CreateModel(
            name="GameType",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100, unique=True)),
                ("created_on", models.DateTimeField(auto_now_add=True)),
                ("updated_on", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Game",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "year_published",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                (
                    "min_players",
                    models.PositiveSmallIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                (
                    "max_players",
                    models.PositiveSmallIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                (
                    "min_playing_time",
                    models.PositiveIntegerField(
                        blank=True,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "max_playing_time",
                    models.PositiveIntegerField(blank=True, null=True),
                ),
                (
                    "rating",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=4,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("10")),
                        ],
                    ),
                ),
                ("rating_count", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "difficulty_score",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=3,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("5")),
                        ],
                    ),
                ),
                ("created_on", models.DateTimeField(auto_now_add=True)),
                ("updated_on", models.DateTimeField(auto_now=True)),
                (
                    "game_categories",
                    models.ManyToManyField(
                        related_name="games", to="catalog.gamecategory"
                    ),
                ),
            ],
            options={
                "ordering": ["name", "pk"],
                "indexes": [
                    models.Index(fields=["name"], name="game_name_idx"),
                    models.Index(fields=["rating"], name="game_rating_idx"),
                    models.Index(
                        fields=["rating_count"], name="game_rating_count_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("max_players__gte", models.F("min_players"))
                        ),
                        name="game_player_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("min_playing_time__isnull", True),
                            ("max_playing_time__isnull", True),
                            ("max_playing_time__gte", models.F("min_playing_time")),
                            _connector="OR",
                        ),
                        name="game_playing_time_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="GameGameType",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "rank",
                    models.PositiveIntegerField(
                        blank=True,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "game",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        to="catalog.game",
                    ),
                ),
                (
                    "game_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        to="catalog.gametype",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("game", "game_type"), name="unique_game_game_type"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("rank__isnull", True), ("rank__gt", 0), _connector="OR"
                        ),
                        name="game_type_rank_positive",
                    ),
                ],
            },
        ),
        migrations.AddField(
            model_name="game",
            name="game_types",
            field=models.ManyToManyField(
                related_name="games",
                through="catalog.GameGameType",
                to="catalog.gametype",
            ),
        ),
        migrations.CreateModel(
            name="GameRelation",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "relation_type",
                    models.CharField(
                        choices=[
                            ("expands", "Expands"),
                            ("contains", "Contains"),
                            ("reimplements", "Reimplements"),
                            ("integrates_with", "Integrates with"),
                        ],
                        max_length=50,
                    ),
                ),
                ("created_on", models.DateTimeField(auto_now_add=True)),
                (
                    "source_game",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="outgoing_relations",
                        to="catalog.game",
                    ),
                ),
                (
                    "target_game",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="incoming_relations",
                        to="catalog.game",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["target_game", "source_game", "relation_type"],
                        name="game_relation_reverse_idx",
                    ),
                    models.Index(
                        fields=["relation_type"], name="game_relation_type_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("source_game", "target_game", "relation_type"),
                        name="unique_game_relation",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("source_game", models.F("target_game")), _negated=True
                        ),
                        name="prevent_self_relation",
                    ),
                ],
            },
        ),
    ]
