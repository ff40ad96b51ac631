"""Search adapter layer - abstracts over the upstream paginated search API."""

from app.adapters.search.base import AbstractSearchTransport, SearchPage
from app.adapters.search.factory import create_search_transport
from app.adapters.search.scryfall_client import ScryfallSearchClient

__all__ = [
    "AbstractSearchTransport",
    "ScryfallSearchClient",
    "SearchPage",
    "create_search_transport",
]
