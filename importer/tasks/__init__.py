"""
Celery tasks for the BGG importer
"""

from .games import import_bgg_games_task  # NOQA: F401
