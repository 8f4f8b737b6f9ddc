"""
Service layer.

``song_repository`` talks to SQLite, ``lyrics`` paginates lyric text
and ``song_service`` holds the catalog business rules on top of both.
"""
