from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SearchPage:
	"""One page of results as returned by the upstream search service.

	Attributes:
		items: Result records in upstream order.
		has_more: Whether the upstream reports further pages.
		total_count: Upstream estimate of the total number of matches.
	"""

	items: list[dict[str, Any]] = field(default_factory=list)
	has_more: bool = False
	total_count: int = 0

	@classmethod
	def empty(cls) -> "SearchPage":
		"""Page representing a "nothing matches" answer."""
		return cls(items=[], has_more=False, total_count=0)


class AbstractSearchTransport(ABC):
	"""Interface for upstream paginated search clients."""

	@abstractmethod
	async def fetch_page(self, query: str, order: str, page: int) -> SearchPage:
		"""Fetch a single 1-based page of results.

		Args:
			query: Upstream query string.
			order: Upstream sort key.
			page: 1-based page number.

		Returns:
			SearchPage: The page; empty when the upstream has no matches.

		Raises:
			UpstreamAppError: If the upstream call fails for any other reason.
		"""
		...

	async def aclose(self) -> None:
		"""Release network resources held by the transport."""
		return None
