import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [("catalog", "0001_initial")]

    operations = [
        migrations.CreateModel(
            name="BggGameAssociation",
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
                    "bgg_id",
                    models.PositiveIntegerField(
                        help_text="BoardGameGeek thing id",
                        unique=True,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("created", models.DateTimeField(auto_now_add=True)),
                (
                    "game",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bgg_associations",
                        to="catalog.game",
                    ),
                ),
            ],
            options={
                "verbose_name": "BGG game association",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("bgg_id__gt", 0)),
                        name="bgg_id_positive",
                    )
                ],
            },
        ),
    ]
