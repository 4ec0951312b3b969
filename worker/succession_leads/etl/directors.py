"""Resolve the youngest director of a company from its officer list."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import requests

from succession_leads.core.config import COMPANIES_HOUSE_BASE_URL, Settings
from succession_leads.core.models import DirectorInfo, Failure
from succession_leads.vendors import companies_house

logger = logging.getLogger(__name__)

DIRECTOR_ROLE = "director"


def _birth_year(officer: Dict[str, Any]) -> Optional[int]:
    dob = officer.get("date_of_birth")
    if not isinstance(dob, dict):
        return None
    year = dob.get("year")
    if isinstance(year, bool):
        return None
    if isinstance(year, int):
        return year or None
    if isinstance(year, str) and year.strip().isdigit():
        return int(year.strip()) or None
    return None


def youngest_director(officers: Iterable[Dict[str, Any]], current_year: int) -> DirectorInfo:
    """Pick the director with the lowest age.

    Age is ``current_year - birth year``; months and days are ignored, so an
    officer may read up to a year older than they are. Ties keep the officer
    listed first.
    """
    youngest: Optional[DirectorInfo] = None
    for officer in officers:
        if not isinstance(officer, dict) or officer.get("officer_role") != DIRECTOR_ROLE:
            continue
        year = _birth_year(officer)
        if year is None:
            continue
        age = current_year - year
        if youngest is None or age < youngest.age:
            youngest = DirectorInfo(name=officer.get("name"), age=age)
    return youngest or DirectorInfo()


class DirectorResolver:
    """Looks up officers for a company and reports its youngest director."""

    def __init__(
        self,
        api_key: str,
        base_url: str = COMPANIES_HOUSE_BASE_URL,
        timeout: float = companies_house.DEFAULT_TIMEOUT,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.today = today

    @classmethod
    def from_settings(cls, settings: Settings) -> "DirectorResolver":
        return cls(
            settings.require_registry_key(),
            base_url=settings.companies_house_base_url,
            timeout=settings.registry_timeout,
        )

    def fetch_officers(self, company_number: str) -> Union[List[Dict[str, Any]], Failure]:
        try:
            payload = companies_house.company_officers(
                company_number,
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        except (requests.RequestException, companies_house.CompaniesHouseError) as exc:
            return Failure(f"officers for {company_number}: {exc}")

        officers = payload.get("items") or []
        if not isinstance(officers, list):
            return Failure(f"officers for {company_number}: malformed items")
        return officers

    def resolve_youngest_director(self, company_number: str) -> DirectorInfo:
        if not company_number:
            logger.debug("Skipping director lookup for company without a number")
            return DirectorInfo()

        officers = self.fetch_officers(company_number)
        if isinstance(officers, Failure):
            logger.warning("Error fetching directors: %s", officers.reason)
            return DirectorInfo()

        return youngest_director(officers, self.today().year)
