"""Error taxonomy for recipe discovery."""


class RecipeDiscoveryError(RuntimeError):
    """Base class for recipe discovery failures."""


class InvalidQueryError(RecipeDiscoveryError):
    """A planned search query was malformed."""


class TransportError(RecipeDiscoveryError):
    """A recipe search call failed in a way that aborts the whole batch."""


class RateLimitedError(RecipeDiscoveryError):
    """The recipe search provider rejected a query with a rate limit."""

    def __init__(self, query: str) -> None:
        super().__init__(f"Rate limited on query: {query}")
        self.query = query


class StoreError(RecipeDiscoveryError):
    """The persistent recipe store failed to read or write."""
