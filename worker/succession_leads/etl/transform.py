"""Utilities for transforming Companies House records into result rows."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from succession_leads.core.models import ELDERLY_AGE, CompanyCandidate, CompanyResult, DirectorInfo

logger = logging.getLogger(__name__)

COMPANY_LINK_BASE = "https://find-and-update.company-information.service.gov.uk/company"
ACTIVE_STATUS = "active"


def flatten_record(record: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dotted keys.

    Lists and scalars are leaves and are kept as-is, so
    ``{"address": {"postal_code": "AB1"}}`` becomes ``{"address.postal_code": "AB1"}``.
    Raises ``ValueError`` when two leaves would share a dotted path.
    """
    flat: Dict[str, Any] = {}
    for key, value in record.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        leaves = flatten_record(value, path) if isinstance(value, Mapping) else {path: value}
        for leaf_path, leaf in leaves.items():
            if leaf_path in flat:
                raise ValueError(f"duplicate flattened key: {leaf_path}")
            flat[leaf_path] = leaf
    return flat


def get_flat_value(record: Mapping[str, Any], path: str, default: Any = "") -> Any:
    value = record.get(path)
    return value if value not in (None, "") else default


def filter_active(records: Iterable[CompanyCandidate]) -> List[CompanyCandidate]:
    return [record for record in records if record.get("company_status") == ACTIVE_STATUS]


def build_company_link(company_number: str) -> str:
    return f"{COMPANY_LINK_BASE}/{company_number}"


def is_elderly(age: Optional[int]) -> bool:
    return age is not None and age >= ELDERLY_AGE


def to_company_result(company: CompanyCandidate, director: DirectorInfo) -> CompanyResult:
    if director.age is None:
        raise ValueError("director age is required to build a company result")

    number = str(get_flat_value(company, "company_number"))
    return CompanyResult(
        name=str(get_flat_value(company, "title")),
        number=number,
        status=str(get_flat_value(company, "company_status")),
        address=str(get_flat_value(company, "address.address_line_1")),
        postcode=str(get_flat_value(company, "address.postal_code")),
        link=build_company_link(number),
        director_name=director.name,
        age=director.age,
        is_elderly=is_elderly(director.age),
    )
