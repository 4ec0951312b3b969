"""Search the registry and keep companies whose youngest director is 60 or older."""

from __future__ import annotations

import argparse
import json
import logging
import threading
import time
from typing import List, Optional

from succession_leads.core.config import SEARCH_TERMS, ConfigError, Settings, get_settings
from succession_leads.core.models import CompanyCandidate, CompanyResult, Failure, SearchResponse
from succession_leads.etl.directors import DirectorResolver
from succession_leads.etl.pages import PAGE_SIZE, RegistryPageFetcher
from succession_leads.etl.transform import get_flat_value, to_company_result

logger = logging.getLogger(__name__)

MAX_RESULTS = 100
REQUEST_DELAY_SECONDS = 0.2

EMPTY_TERM_MESSAGE = "Please enter a search term"
NOT_FOUND_MESSAGE = "No companies found matching your search criteria"


class SearchInputError(ValueError):
    """Raised when the search term is missing."""


class NoCompaniesFound(LookupError):
    """Raised when the registry has no active companies for the term."""


class SearchFailed(RuntimeError):
    """Raised when an unexpected error aborts a search run."""


class SearchCancelled(SearchFailed):
    """Raised when the caller cancels a search run."""


class SearchAggregator:
    """Pages through registry results and enriches each company with its youngest director.

    One instance may be reused, but each ``search`` call keeps its own accumulator.
    """

    def __init__(
        self,
        fetcher: RegistryPageFetcher,
        resolver: DirectorResolver,
        max_results: int = MAX_RESULTS,
        request_delay: float = REQUEST_DELAY_SECONDS,
    ) -> None:
        self.fetcher = fetcher
        self.resolver = resolver
        self.max_results = max_results
        self.request_delay = request_delay

    @classmethod
    def from_settings(cls, settings: Settings) -> "SearchAggregator":
        return cls(RegistryPageFetcher.from_settings(settings), DirectorResolver.from_settings(settings))

    def search(self, term: Optional[str], cancel_event: Optional[threading.Event] = None) -> SearchResponse:
        term = (term or "").strip()
        if not term:
            raise SearchInputError(EMPTY_TERM_MESSAGE)

        logger.info("Received search request for term: %s", term)
        try:
            total_results, companies = self._collect_companies(term, cancel_event)
            results = self._resolve_directors(companies, cancel_event)
        except (NoCompaniesFound, SearchFailed):
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Search failed for term=%s", term)
            raise SearchFailed(f"An error occurred while searching: {exc}") from exc

        elderly = [result for result in results if result.is_elderly]
        logger.info("Returning %d companies for term=%s (total_found=%d)", len(elderly), term, total_results)
        return SearchResponse(results=elderly, total_found=total_results)

    def _collect_companies(self, term: str, cancel_event: Optional[threading.Event]):
        _check_cancelled(cancel_event)
        first_page = self.fetcher.fetch_page(0, term)
        if isinstance(first_page, Failure) or first_page.total_results == 0:
            raise NoCompaniesFound(NOT_FOUND_MESSAGE)

        total_results = first_page.total_results
        logger.info("Total results found: %d", total_results)
        companies: List[CompanyCandidate] = list(first_page.companies)
        target = min(total_results, self.max_results)

        offset = 0
        while len(companies) < target:
            offset += PAGE_SIZE
            if offset >= total_results:
                break

            time.sleep(self.request_delay)
            _check_cancelled(cancel_event)
            page = self.fetcher.fetch_page(offset, term)
            if isinstance(page, Failure):
                logger.warning("Skipping page at start_index=%d: %s", offset, page.reason)
                continue
            if page.companies:
                logger.info("Adding %d companies to results", len(page.companies))
                companies.extend(page.companies)

        companies = companies[: self.max_results]
        if not companies:
            logger.info("No companies found after all pages processed")
            raise NoCompaniesFound(NOT_FOUND_MESSAGE)
        return total_results, companies

    def _resolve_directors(
        self, companies: List[CompanyCandidate], cancel_event: Optional[threading.Event]
    ) -> List[CompanyResult]:
        logger.info("Processing %d companies for director information", len(companies))
        results: List[CompanyResult] = []
        for company in companies:
            _check_cancelled(cancel_event)
            company_number = str(get_flat_value(company, "company_number"))
            director = self.resolver.resolve_youngest_director(company_number)
            if director.age is None:
                logger.debug("Skipping %s without director age", company_number)
                continue

            try:
                results.append(to_company_result(company, director))
            except (TypeError, ValueError) as exc:
                logger.warning("Error processing company %s: %s", company_number, exc)
                continue
        return results


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise SearchCancelled("Search was cancelled")


def run_search(term: str, settings: Optional[Settings] = None) -> SearchResponse:
    """Validate input and configuration, then run one search with a fresh aggregator."""
    if not (term or "").strip():
        raise SearchInputError(EMPTY_TERM_MESSAGE)
    settings = settings or get_settings()
    aggregator = SearchAggregator.from_settings(settings)
    return aggregator.search(term)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find companies whose youngest director is 60 or older")
    parser.add_argument("term", nargs="?", help="Company name search term, e.g. 'Financial Advi'")
    parser.add_argument("--list-terms", action="store_true", help="Print the curated search terms and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_terms:
        print("\n".join(SEARCH_TERMS))
        return 0

    try:
        response = run_search(args.term)
    except SearchInputError as exc:
        parser.error(str(exc))
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except NoCompaniesFound as exc:
        print(str(exc))
        return 0
    except SearchFailed as exc:
        logger.error("%s", exc)
        return 1

    print(json.dumps(response.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
