from datetime import date

import pytest

from succession_leads.core.config import ConfigError, Settings
from succession_leads.core.models import DirectorInfo, Failure
from succession_leads.etl import directors


def _officer(name, year, role="director"):
    officer = {"name": name, "officer_role": role}
    if year is not None:
        officer["date_of_birth"] = {"month": 6, "year": year}
    return officer


def _resolver(monkeypatch, officers=None, error=None):
    calls = []

    def fake_officers(company_number, api_key, base_url, timeout):
        calls.append(company_number)
        if error is not None:
            raise error
        return {"items": officers or []}

    monkeypatch.setattr(directors.companies_house, "company_officers", fake_officers)
    resolver = directors.DirectorResolver("key", today=lambda: date(2026, 1, 15))
    return resolver, calls


def test_youngest_director_uses_birth_year_only(monkeypatch):
    resolver, calls = _resolver(
        monkeypatch,
        [
            _officer("OLD, Arthur", 1950),
            _officer("SECRETARY, Sam", 1990, role="secretary"),
            _officer("YOUNGER, Beth", 1964),
            _officer("UNKNOWN, Una", None),
        ],
    )

    info = resolver.resolve_youngest_director("01234567")

    assert info == DirectorInfo(name="YOUNGER, Beth", age=62)
    assert calls == ["01234567"]


def test_ties_keep_first_encountered():
    officers = [_officer("FIRST, Ann", 1960), _officer("SECOND, Bob", 1960)]
    assert directors.youngest_director(officers, 2026) == DirectorInfo(name="FIRST, Ann", age=66)


def test_string_birth_year_is_accepted():
    officer = {"name": "TEXT, Tom", "officer_role": "director", "date_of_birth": {"year": "1961"}}
    assert directors.youngest_director([officer], 2026).age == 65


def test_no_qualifying_director_yields_nulls(monkeypatch):
    resolver, _ = _resolver(monkeypatch, [_officer("SEC, Sue", 1950, role="secretary"), _officer("NODOB, Ned", None)])
    assert resolver.resolve_youngest_director("1") == DirectorInfo(None, None)


def test_fetch_failure_is_swallowed(monkeypatch, caplog):
    resolver, _ = _resolver(monkeypatch, error=directors.requests.HTTPError("404"))

    assert isinstance(resolver.fetch_officers("1"), Failure)
    with caplog.at_level("WARNING"):
        assert resolver.resolve_youngest_director("1") == DirectorInfo()
    assert "Error fetching directors" in " ".join(caplog.messages)


def test_blank_company_number_skips_lookup(monkeypatch):
    resolver, calls = _resolver(monkeypatch, [_officer("A", 1950)])
    assert resolver.resolve_youngest_director("") == DirectorInfo()
    assert calls == []


def test_from_settings_requires_key():
    with pytest.raises(ConfigError):
        directors.DirectorResolver.from_settings(Settings(companies_house_api_key=""))
