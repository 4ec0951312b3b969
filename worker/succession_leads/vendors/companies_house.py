"""Client utilities for the Companies House public data API."""

import logging
from typing import Any, Dict

import requests

from succession_leads.core.config import COMPANIES_HOUSE_BASE_URL

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
DEFAULT_TIMEOUT = 10


class CompaniesHouseError(RuntimeError):
    """Raised when the registry returns a body we cannot use."""


def _get_json(url: str, api_key: str, params: Dict[str, Any], timeout: float) -> Dict[str, Any]:
    # The API key is the basic-auth username; the password is always empty.
    response = _SESSION.get(url, params=params, auth=(api_key, ""), timeout=timeout)
    response.raise_for_status()
    try:
        payload = response.json()
    except ValueError as exc:
        raise CompaniesHouseError(f"invalid JSON from {url}") from exc
    if not isinstance(payload, dict):
        logger.error("Unexpected payload type from %s: %s", url, type(payload).__name__)
        raise CompaniesHouseError(f"unexpected payload from {url}")
    return payload


def search_companies(
    query: str,
    api_key: str,
    start_index: int = 0,
    items_per_page: int = 100,
    base_url: str = COMPANIES_HOUSE_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    params = {"q": query, "items_per_page": items_per_page, "start_index": start_index}
    return _get_json(f"{base_url}/search/companies", api_key, params, timeout)


def company_officers(
    company_number: str,
    api_key: str,
    items_per_page: int = 100,
    base_url: str = COMPANIES_HOUSE_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    params = {"items_per_page": items_per_page}
    return _get_json(f"{base_url}/company/{company_number}/officers", api_key, params, timeout)
