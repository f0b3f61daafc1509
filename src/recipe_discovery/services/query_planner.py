"""Search query planning for pantry ingredient sets."""

from itertools import combinations

MAX_QUERIES = 6


def plan_queries(terms: list[str], max_queries: int = MAX_QUERIES) -> list[str]:
    """Build search queries: singles first, then pairs, then triples.

    Triples are only planned for three or four terms; the combined list is
    truncated to ``max_queries`` entries.
    """
    queries: list[str] = list(terms)
    if len(terms) >= 2:
        queries.extend(" ".join(pair) for pair in combinations(terms, 2))
    if 3 <= len(terms) <= 4:
        queries.extend(" ".join(triple) for triple in combinations(terms, 3))
    return queries[:max_queries]
