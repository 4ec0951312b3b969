"""Fetch and normalise single pages of Companies House search results."""

from __future__ import annotations

import logging
from typing import Union

import requests

from succession_leads.core.config import COMPANIES_HOUSE_BASE_URL, Settings
from succession_leads.core.models import Failure, PageResult
from succession_leads.etl.transform import filter_active, flatten_record
from succession_leads.vendors import companies_house

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class RegistryPageFetcher:
    """Fetches one page of company search results and keeps the active companies."""

    def __init__(
        self,
        api_key: str,
        base_url: str = COMPANIES_HOUSE_BASE_URL,
        timeout: float = companies_house.DEFAULT_TIMEOUT,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.page_size = page_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "RegistryPageFetcher":
        return cls(
            settings.require_registry_key(),
            base_url=settings.companies_house_base_url,
            timeout=settings.registry_timeout,
        )

    def fetch_page(self, offset: int, term: str) -> Union[PageResult, Failure]:
        if offset < 0:
            raise ValueError("offset must be zero or positive")
        if not term:
            raise ValueError("term must be provided for registry searches")

        logger.info("Fetching registry page term=%s start_index=%d", term, offset)
        try:
            payload = companies_house.search_companies(
                query=term,
                api_key=self.api_key,
                start_index=offset,
                items_per_page=self.page_size,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        except (requests.RequestException, companies_house.CompaniesHouseError) as exc:
            logger.warning("Registry page at start_index=%d failed: %s", offset, exc)
            return Failure(f"page {offset}: {exc}")

        items = payload.get("items") or []
        try:
            total_results = int(payload.get("total_results") or 0)
        except (TypeError, ValueError):
            logger.warning("Registry page at start_index=%d has a malformed total_results", offset)
            return Failure(f"page {offset}: malformed total_results")
        if not isinstance(items, list):
            logger.warning("Registry page at start_index=%d has a malformed items list", offset)
            return Failure(f"page {offset}: malformed items")

        logger.info("Found %d items, total results: %d", len(items), total_results)
        if not items:
            return PageResult(companies=[], total_results=total_results)

        flattened = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                flattened.append(flatten_record(item))
            except ValueError as exc:
                logger.warning("Skipping malformed company at start_index=%d: %s", offset, exc)
        active = filter_active(flattened)
        logger.info("After filtering for active companies: %d items", len(active))
        return PageResult(companies=active, total_results=total_results)
