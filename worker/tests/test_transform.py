import pytest

from succession_leads.core.models import DirectorInfo
from succession_leads.etl import transform


def test_flatten_record_dots_nested_keys_and_keeps_lists():
    record = {
        "title": "ACME ADVISERS LTD",
        "address": {"address_line_1": "1 Main St", "postal_code": "AB1 2CD", "extra": {"deep": 1}},
        "matches": {"title": [1, 4]},
        "description_identifier": ["incorporated-on"],
        "empty": {},
    }

    flat = transform.flatten_record(record)

    assert flat == {
        "title": "ACME ADVISERS LTD",
        "address.address_line_1": "1 Main St",
        "address.postal_code": "AB1 2CD",
        "address.extra.deep": 1,
        "matches.title": [1, 4],
        "description_identifier": ["incorporated-on"],
    }


def _leaves(node, path=()):
    if isinstance(node, dict):
        for key, value in node.items():
            yield from _leaves(value, path + (key,))
    else:
        yield ".".join(path), node


def test_flatten_record_preserves_every_leaf():
    record = {"a": {"b": {"c": None, "d": False}, "e": 0}, "f": "x", "g": [{"h": 1}]}
    flat = transform.flatten_record(record)
    for path, value in _leaves(record):
        assert flat[path] is value


def test_filter_active_drops_other_statuses():
    records = [
        {"company_number": "1", "company_status": "active"},
        {"company_number": "2", "company_status": "dissolved"},
        {"company_number": "3"},
    ]
    assert [r["company_number"] for r in transform.filter_active(records)] == ["1"]


def test_get_flat_value_defaults():
    flat = {"address.postal_code": "AB1", "address.address_line_1": None}
    assert transform.get_flat_value(flat, "address.postal_code") == "AB1"
    assert transform.get_flat_value(flat, "address.address_line_1") == ""
    assert transform.get_flat_value(flat, "missing", "n/a") == "n/a"


def test_to_company_result_builds_link_and_elderly_flag():
    company = transform.flatten_record(
        {
            "title": "ACME ADVISERS LTD",
            "company_number": "01234567",
            "company_status": "active",
            "address": {"address_line_1": "1 Main St", "postal_code": "AB1 2CD"},
        }
    )

    result = transform.to_company_result(company, DirectorInfo(name="SMITH, Jane", age=60))

    assert result.name == "ACME ADVISERS LTD"
    assert result.number == "01234567"
    assert result.status == "active"
    assert result.address == "1 Main St"
    assert result.postcode == "AB1 2CD"
    assert result.link == "https://find-and-update.company-information.service.gov.uk/company/01234567"
    assert result.director_name == "SMITH, Jane"
    assert result.age == 60
    assert result.is_elderly is True

    younger = transform.to_company_result(company, DirectorInfo(name="DOE, John", age=59))
    assert younger.is_elderly is False


def test_to_company_result_requires_age():
    with pytest.raises(ValueError):
        transform.to_company_result({"company_number": "1"}, DirectorInfo())


def test_flatten_record_rejects_colliding_paths():
    with pytest.raises(ValueError, match="a.b"):
        transform.flatten_record({"a.b": 1, "a": {"b": 2}})
    with pytest.raises(ValueError, match="a.b"):
        transform.flatten_record({"a": {"b": 2}, "a.b": 1})
