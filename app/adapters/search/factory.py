"""Factory for creating upstream search transports."""

from app.adapters.search.base import AbstractSearchTransport
from app.adapters.search.scryfall_client import ScryfallSearchClient
from app.core.config import SearchSettings, settings
from app.core.errors import ValidationAppError


def create_search_transport(search_settings: SearchSettings | None = None) -> AbstractSearchTransport:
    """Instantiate the search transport configured for this process.

    Args:
        search_settings: Optional settings; defaults to the global settings.

    Returns:
        AbstractSearchTransport: Configured transport instance.

    Raises:
        ValidationAppError: If the provider is unknown or misconfigured.
    """
    cfg = search_settings or settings.search
    provider = cfg.provider.lower()

    if provider == "scryfall":
        if not cfg.user_agent:
            raise ValidationAppError(
                code="search_missing_user_agent",
                message="Scryfall provider requires SEARCH_USER_AGENT to be set",
            )
        return ScryfallSearchClient(
            base_url=cfg.base_url,
            user_agent=cfg.user_agent,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise ValidationAppError(
        code="search_unknown_provider",
        message=(
            f"Unknown search provider: '{provider}'. Supported providers: scryfall"
        ),
    )
