"""Tests for grouped checks."""
import pytest

from travel_catalog_contracts.assertions import (
    CheckFailure,
    CheckGroup,
    ContractViolation,
    FixtureNotFoundError,
    find_by_name,
    require_status,
)
from travel_catalog_contracts.http_client import HttpExchange


def _exchange(body, status=200):
    return HttpExchange("GET", "destination/1", None, status, body)


def test_all_failures_in_a_group_are_reported_together():
    with pytest.raises(ContractViolation) as excinfo:
        with CheckGroup("verify destination") as checks:
            checks.equals("Lima, Peru", "Hawaii, USA", "Destination location should match the input.")
            checks.equals("A beach", "A beautiful beach", "Destination description should match the input.")
            checks.equals("April to October", "April to October", "Destination bestTimeToVisit should match the input.")

    violation = excinfo.value
    assert violation.step == "verify destination"
    assert len(violation.failures) == 2
    message = str(violation)
    assert "2 check(s) failed" in message
    assert "expected 'Hawaii, USA', got 'Lima, Peru'" in message
    assert "Destination description should match the input." in message


def test_passing_group_does_not_raise():
    with CheckGroup("list") as checks:
        assert checks.status_is(_exchange("[]"), 200)
        assert checks.json_array(_exchange("[1, 2]")) == [1, 2]
        assert checks.not_blank("x", "value")
    assert checks.passed


def test_violation_is_an_assertion_error():
    assert issubclass(ContractViolation, AssertionError)
    assert issubclass(FixtureNotFoundError, ContractViolation)


def test_status_failure_shows_expected_actual_and_body():
    group = CheckGroup("create")
    assert not group.status_is(_exchange('{"message": "nope"}', status=400), 200)
    text = str(group.failures[0])
    assert "OK (200)" in text
    assert "got 400" in text
    assert "nope" in text


def test_json_checks_return_none_on_wrong_shape():
    group = CheckGroup("shape")
    assert group.json_array(_exchange('{"items": []}')) is None
    assert group.json_object(_exchange("[]")) is None
    assert group.json_object(_exchange("not json")) is None
    assert group.json_object(_exchange("null")) is None
    assert len(group.failures) == 4
    assert "not valid JSON" in str(group.failures[2])


def test_absence_and_emptiness():
    group = CheckGroup("absent")
    assert group.is_absent(_exchange("null"))
    assert group.is_absent(_exchange(""))
    assert not group.is_absent(_exchange('{"_id": "1"}'))
    assert not group.not_empty(_exchange(""))
    assert len(group.failures) == 2


def test_sequence_equals_points_out_reordering():
    group = CheckGroup("attractions")
    assert group.sequence_equals(["a", "b"], ["a", "b"], "order")
    assert not group.sequence_equals(["b", "a"], ["a", "b"], "Destination attractions should keep their order.")
    assert "different order" in str(group.failures[0])
    assert not group.sequence_equals(None, ["a"], "missing")


def test_size_and_threshold_checks():
    group = CheckGroup("sizes")
    assert group.size_is([1, 2, 3], 3, "three")
    assert not group.size_is(None, 3, "unsized")
    assert group.greater_than(1, 0, "some")
    assert not group.greater_than(0, 0, "Expected at least one category in the response")
    assert not group.greater_than(None, 0, "none")
    assert len(group.failures) == 3


def test_references_id_accepts_embedded_or_bare_reference():
    group = CheckGroup("category ref")
    assert group.references_id({"_id": "c1", "name": "Beaches"}, "c1", "embedded")
    assert group.references_id("c1", "c1", "bare")
    assert not group.references_id({"_id": "c2"}, "c1", "wrong")
    assert not group.references_id(None, "c1", "missing")


def test_nested_hard_failure_is_merged_with_siblings():
    with pytest.raises(ContractViolation) as excinfo:
        with CheckGroup("outer") as checks:
            checks.equals(1, 2, "first")
            require_status(_exchange("", status=500), 200, "inner")

    violation = excinfo.value
    assert violation.step == "outer"
    assert len(violation.failures) == 2


def test_other_exceptions_propagate_unchanged():
    with pytest.raises(KeyError):
        with CheckGroup("boom") as checks:
            checks.equals(1, 2, "first")
            raise KeyError("x")


def test_require_status_raises_immediately():
    with pytest.raises(ContractViolation, match="update category"):
        require_status(_exchange("", status=404), 200, "update category")
    require_status(_exchange(""), 200, "fine")


def test_find_by_name():
    items = [{"name": "Maui Beach", "_id": "1"}, "junk", {"name": "New York City", "_id": "2"}]
    assert find_by_name(items, "New York City", "destination")["_id"] == "2"

    with pytest.raises(FixtureNotFoundError) as excinfo:
        find_by_name(items, "Summer in Machu Picchu", "destination")
    assert excinfo.value.name == "Summer in Machu Picchu"
    assert "Expected to find destination 'Summer in Machu Picchu'" in str(excinfo.value)


def test_check_failure_formatting():
    assert str(CheckFailure("plain")) == "plain"
    assert str(CheckFailure("value", expected=1, actual=2)) == "value: expected 1, got 2"
