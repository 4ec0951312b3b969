"""Core data models shared by the company search pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

ELDERLY_AGE = 60

# A flattened registry record: dotted path -> leaf value.
CompanyCandidate = Dict[str, Any]


@dataclass(frozen=True, slots=True)
class Failure:
    """Explicit failure value returned by per-item upstream calls."""

    reason: str


@dataclass(frozen=True, slots=True)
class PageResult:
    """One page of active companies plus the registry's total match count."""

    companies: List[CompanyCandidate]
    total_results: int


@dataclass(frozen=True, slots=True)
class DirectorInfo:
    name: Optional[str] = None
    age: Optional[int] = None


@dataclass(frozen=True, slots=True)
class CompanyResult:
    """Externally visible record for a company and its youngest director."""

    name: str
    number: str
    status: str
    address: str
    postcode: str
    link: str
    director_name: Optional[str]
    age: int
    is_elderly: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SearchResponse:
    results: List[CompanyResult] = field(default_factory=list)
    total_found: int = 0

    @property
    def total_returned(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "total_found": self.total_found,
            "total_returned": self.total_returned,
        }


@dataclass(frozen=True, slots=True)
class EmailDraft:
    subject: str
    body: str
    tokens_used: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
