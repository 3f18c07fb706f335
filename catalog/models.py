from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q

#: Name used for the type and category assigned to games whose source data
#: carries none
GENERAL = "General"

#: Game types seeded by the initial data migration
DEFAULT_GAME_TYPES = ("abstract", "family", "party", "strategy", "thematic")


class GameType(models.Model):
    name = models.CharField(max_length=100, unique=True)

    created_on = models.DateTimeField(auto_now_add=True)
    updated_on = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class GameCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)

    created_on = models.DateTimeField(auto_now_add=True)
    updated_on = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "game categories"

    def __str__(self):
        return self.name


class GameQuerySet(models.QuerySet):
    def with_taxonomy(self):
        return self.prefetch_related("game_types", "game_categories")

    def name_contains(self, name):
        return self.filter(name__icontains=name)

    def for_player_count(self, player_count):
        return self.filter(min_players__lte=player_count, max_players__gte=player_count)

    def for_playing_time(self, minutes):
        return self.filter(
            min_playing_time__lte=minutes, max_playing_time__gte=minutes
        )

    def max_playing_time_within(self, minutes):
        return self.filter(max_playing_time__lte=minutes)

    def min_playing_time_at_least(self, minutes):
        return self.filter(min_playing_time__gte=minutes)

    def with_game_types(self, names):
        return self.filter(game_types__name__in=names).distinct()

    def min_rating(self, rating):
        return self.filter(rating__gte=rating)


class Game(models.Model):
    """
    A board game (or expansion) in the catalog.

    Games are only written by the BGG importer, which guarantees that every
    game has at least one type and one category.
    """

    objects = GameQuerySet.as_manager()

    name = models.CharField(max_length=255)
    year_published = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    min_players = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    max_players = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])

    min_playing_time = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1)]
    )
    max_playing_time = models.PositiveIntegerField(null=True, blank=True)

    rating = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[
            MinValueValidator(Decimal("0")),
            MaxValueValidator(Decimal("10")),
        ],
    )
    rating_count = models.PositiveIntegerField(null=True, blank=True)
    difficulty_score = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[
            MinValueValidator(Decimal("0")),
            MaxValueValidator(Decimal("5")),
        ],
    )

    game_types = models.ManyToManyField(
        GameType, through="GameGameType", related_name="games"
    )
    game_categories = models.ManyToManyField(GameCategory, related_name="games")

    created_on = models.DateTimeField(auto_now_add=True)
    updated_on = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "pk"]
        indexes = [
            models.Index(fields=["name"], name="game_name_idx"),
            models.Index(fields=["rating"], name="game_rating_idx"),
            models.Index(fields=["rating_count"], name="game_rating_count_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_players__gte=F("min_players")),
                name="game_player_range",
            ),
            models.CheckConstraint(
                condition=Q(min_playing_time__isnull=True)
                | Q(max_playing_time__isnull=True)
                | Q(max_playing_time__gte=F("min_playing_time")),
                name="game_playing_time_range",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        super().clean()

        errors = {}
        if (
            self.min_players is not None
            and self.max_players is not None
            and self.max_players < self.min_players
        ):
            errors["max_players"] = "Must be greater than or equal to min players"
        if (
            self.min_playing_time is not None
            and self.max_playing_time is not None
            and self.max_playing_time < self.min_playing_time
        ):
            errors["max_playing_time"] = (
                "Must be greater than or equal to min playing time"
            )
        if errors:
            raise ValidationError(errors)

    @property
    def bgg_id(self):
        association = self.bgg_associations.first()
        return association.bgg_id if association else None

    def _related_sources(self, relation_type):
        return Game.objects.filter(
            outgoing_relations__target_game=self,
            outgoing_relations__relation_type=relation_type,
        )

    def _related_targets(self, relation_type):
        return Game.objects.filter(
            incoming_relations__source_game=self,
            incoming_relations__relation_type=relation_type,
        )

    @property
    def expansions(self):
        return self._related_sources(GameRelation.RelationType.EXPANDS)

    @property
    def base_games(self):
        return self._related_targets(GameRelation.RelationType.EXPANDS)

    @property
    def contained_games(self):
        return self._related_targets(GameRelation.RelationType.CONTAINS)

    @property
    def containers(self):
        return self._related_sources(GameRelation.RelationType.CONTAINS)

    @property
    def reimplementations(self):
        return self._related_sources(GameRelation.RelationType.REIMPLEMENTS)

    @property
    def reimplemented_games(self):
        return self._related_targets(GameRelation.RelationType.REIMPLEMENTS)

    @property
    def integrated_games(self):
        return self._related_targets(GameRelation.RelationType.INTEGRATES_WITH)


class GameGameType(models.Model):
    """A game's membership in a type, with its BGG family rank if it has one."""

    game = models.ForeignKey(Game, on_delete=models.CASCADE)
    game_type = models.ForeignKey(GameType, on_delete=models.CASCADE)
    rank = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1)]
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["game", "game_type"], name="unique_game_game_type"
            ),
            models.CheckConstraint(
                condition=Q(rank__isnull=True) | Q(rank__gt=0),
                name="game_type_rank_positive",
            ),
        ]

    def __str__(self):
        return f"{self.game} / {self.game_type}"


class GameRelation(models.Model):
    """
    A directed edge between two games.

    The source is always the derived work: the expansion, the compilation,
    the reimplementation or the integrating game.
    """

    class RelationType(models.TextChoices):
        EXPANDS = "expands", "Expands"
        CONTAINS = "contains", "Contains"
        REIMPLEMENTS = "reimplements", "Reimplements"
        INTEGRATES_WITH = "integrates_with", "Integrates with"

    source_game = models.ForeignKey(
        Game, on_delete=models.CASCADE, related_name="outgoing_relations"
    )
    target_game = models.ForeignKey(
        Game, on_delete=models.CASCADE, related_name="incoming_relations"
    )
    relation_type = models.CharField(max_length=50, choices=RelationType.choices)

    created_on = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["source_game", "target_game", "relation_type"],
                name="unique_game_relation",
            ),
            models.CheckConstraint(
                condition=~Q(source_game=F("target_game")),
                name="prevent_self_relation",
            ),
        ]
        indexes = [
            models.Index(
                fields=["target_game", "source_game", "relation_type"],
                name="game_relation_reverse_idx",
            ),
            models.Index(fields=["relation_type"], name="game_relation_type_idx"),
        ]

    def __str__(self):
        return f"{self.source_game} {self.relation_type} {self.target_game}"

    def clean(self):
        super().clean()
        if self.source_game_id and self.source_game_id == self.target_game_id:
            raise ValidationError("A game cannot be related to itself")
