"""
BoardGameGeek XML API2 access: the HTTP client, the typed records it
returns, and the mapping from BGG vocabulary to the catalog's.
"""
