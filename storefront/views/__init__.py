"""Flask blueprints for the public site and the back-office."""

import logging
from typing import Callable, List, TypeVar

from ..api_client import ApiError
from ..logging_config import log_api_event

__all__ = ["fetch_or_empty"]


T = TypeVar("T")


def fetch_or_empty(fetch: Callable[[], List[T]], what: str) -> List[T]:
    """Run a list fetch; on API failure log it and return an empty list.

    Used where a page section should simply render nothing when the API is
    down rather than failing the whole page.
    """
    try:
        return fetch()
    except ApiError as e:
        log_api_event(
            "api_error",
            {"message": f"Error fetching {what}: {e}", "what": what, "status_code": e.status_code},
            level=logging.ERROR,
            logger_name=__name__,
        )
        return []
