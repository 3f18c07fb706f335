"""
See the module-level docstring for implementation details
"""

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from catalog.models import Game


class BggGameAssociation(models.Model):
    """
    Binds one BoardGameGeek id to the catalog Game imported from it.

    The unique bgg_id is the importer's deduplication key: a game which has
    an association is never imported a second time, only refreshed.
    """

    game = models.ForeignKey(
        Game, on_delete=models.CASCADE, related_name="bgg_associations"
    )
    bgg_id = models.PositiveIntegerField(
        unique=True,
        validators=[MinValueValidator(1)],
        help_text="BoardGameGeek thing id",
    )

    created = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "BGG game association"
        constraints = [
            models.CheckConstraint(
                condition=Q(bgg_id__gt=0), name="bgg_id_positive"
            ),
        ]

    def __str__(self):
        return f"BGG {self.bgg_id} -> {self.game}"
