from django.db import migrations

DEFAULT_GAME_TYPES = ("abstract", "family", "party", "strategy", "thematic")


def create_default_game_types(apps, schema_editor):
    GameType = apps.get_model("catalog", "GameType")
    for name in DEFAULT_GAME_TYPES:
        GameType.objects.get_or_create(name=name)


def delete_default_game_types(apps, schema_editor):
    GameType = apps.get_model("catalog", "GameType")
    GameType.objects.filter(name__in=DEFAULT_GAME_TYPES, games__isnull=True).delete()


class Migration(migrations.Migration):
    dependencies = [("catalog", "0001_initial")]

    operations = [
        migrations.RunPython(create_default_game_types, delete_default_game_types)
    ]
