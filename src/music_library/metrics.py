"""Prometheus metrics for the music library service."""
from prometheus_client import Counter, Histogram

# Entity lifecycle metrics
library_entities_created_total = Counter(
    'library_entities_created_total',
    'Total number of entities created',
    ['entity']  # 'artist', 'album', 'genre'
)

library_entities_updated_total = Counter(
    'library_entities_updated_total',
    'Total number of entities updated',
    ['entity']
)

library_entities_deleted_total = Counter(
    'library_entities_deleted_total',
    'Total number of entities deleted',
    ['entity']
)

album_genre_links_total = Counter(
    'album_genre_links_total',
    'Total number of album-genre link changes',
    ['action']  # 'added', 'removed'
)

library_resets_total = Counter(
    'library_resets_total',
    'Total number of database resets'
)

# Search metrics
album_search_queries_total = Counter(
    'album_search_queries_total',
    'Total number of album search queries',
    ['filter']  # 'q', 'title', 'year', 'genre', 'none'
)

album_search_results_total = Counter(
    'album_search_results_total',
    'Total number of album search results returned'
)

album_search_duration_seconds = Histogram(
    'album_search_duration_seconds',
    'Time spent processing album search queries',
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0)
)
