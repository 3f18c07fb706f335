"""
Design
======

The importer fills the catalog from BoardGameGeek (BGG) on demand.

General goals:

* A BGG id is imported at most once. BggGameAssociation records which Game
  came from which BGG id and its unique bgg_id is the only deduplication key,
  so concurrent imports of the same id cannot create two games.
* Every record is reconciled in its own transaction. One bad record in a
  batch is reported as failed without affecting the others.
* Requests made by users only ever wait for a single page of BGG data.

The import process works like this:

1. A user searches by name. SearchImporter runs the BGG search and imports
   the first 20 results with one ``thing`` request, skipping games which were
   imported before.
2. The remaining search results, plus any games linked from the imported
   ones (base games, expansions, reimplementations...) which are not in the
   catalog yet, are queued as a single ``import_bgg_games_task``.
3. The task works through its ids 20 at a time with force_update set, so
   games which raced into the catalog since the task was queued are refreshed
   rather than skipped. BGG timeouts and errors are retried with exponential
   backoff; data problems are logged and the task ends.
4. Relations are only created towards games which are already in the
   catalog. The other side records the relation when it is imported later,
   since BGG lists links on both games.
"""
