from typing import Dict

import requests

from ..config import DEFAULT_SEARCH_URL
from ..domain.models import SearchOptions
from ..logging import get_logger

# Without a browser-like User-Agent the results page answers 403.
DEFAULT_USER_AGENT = "Mozilla/5.0"


def build_search_params(query: str, options: SearchOptions) -> Dict[str, str]:
    """Return the query-string parameters for a shopping results page.

    `tbs=vw:l` selects the list view without ads; `safe=strict` turns on
    safe search.
    """
    return {
        "tbm": "shop",
        "tbs": "vw:l",
        "safe": "strict",
        "hl": options.language,
        "source": "h",
        "q": query,
        "num": str(int(options.max_results)),
    }


class ShoppingSearchClient:
    """Thin client returning the HTML of a shopping search results page."""

    def __init__(
        self,
        base_url: str = DEFAULT_SEARCH_URL,
        *,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.base = base_url.rstrip("/")
        self.timeout = int(timeout)
        self.log = get_logger("search-client")
        self.s = requests.Session()
        self.s.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html",
        })

    def fetch_results_page(self, query: str, options: SearchOptions) -> str:
        params = build_search_params(query, options)
        self.log.info(f"GET results page: q={query!r}, hl={options.language}, num={options.max_results}")
        try:
            r = self.s.get(self.base, params=params, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            self.log.error(f"Search request failed for {query!r}: {e}")
            raise
        return r.text

    def close(self) -> None:
        self.s.close()
