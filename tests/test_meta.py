from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from dbaasapi.meta import (
    CONDITION_FALSE,
    CONDITION_TRUE,
    GROUP_VERSION,
    Condition,
    ConflictError,
    FieldPath,
    GroupVersion,
    InvalidFieldError,
    LabelSelector,
    LabelSelectorRequirement,
    NotFoundError,
    find_status_condition,
    format_value,
    label_selector_as_selector,
    parse_group_version,
    set_status_condition,
)


@dataclass
class NamespacedName:
    namespace: str = ""
    name: str = ""


def test_group_version_string_round_trip():
    assert str(GROUP_VERSION) == "dbaas.redhat.com/v1beta1"
    assert parse_group_version(str(GROUP_VERSION)) == GROUP_VERSION


def test_group_version_without_group():
    assert str(GroupVersion("", "v1")) == "v1"
    assert parse_group_version("v1") == GroupVersion("", "v1")


def test_parse_empty_group_version():
    assert parse_group_version("") == GroupVersion()


def test_parse_invalid_group_version():
    with pytest.raises(ValueError, match="unexpected GroupVersion string"):
        parse_group_version("a/b/c")


def test_field_path_string():
    path = FieldPath("spec").child("providerRef").child("name")
    assert str(path) == "spec.providerRef.name"


def test_invalid_field_error_message_for_string():
    err = InvalidFieldError(
        FieldPath("spec").child("databaseServiceID"),
        "updated-databaseServiceID",
        "databaseServiceID is immutable",
    )
    assert str(err) == (
        'spec.databaseServiceID: Invalid value: "updated-databaseServiceID": '
        "databaseServiceID is immutable"
    )
    assert err.field == "spec.databaseServiceID"


def test_format_value_of_struct():
    value = NamespacedName(namespace="default", name="updated-inventory")
    assert format_value(value) == 'v1beta1.NamespacedName{Namespace:"default", Name:"updated-inventory"}'


def test_format_value_of_none():
    assert format_value(None) == '"null"'


def test_in_without_values_is_rejected():
    selector = LabelSelector(match_expressions=[LabelSelectorRequirement(key="test", operator="In")])
    with pytest.raises(InvalidFieldError) as info:
        label_selector_as_selector(selector)
    assert str(info.value) == (
        "values: Invalid value: []string(nil): "
        "for 'in', 'notin' operators, values set can't be empty"
    )


def test_in_with_values_matches():
    selector = label_selector_as_selector(
        LabelSelector(
            match_expressions=[LabelSelectorRequirement(key="test", operator="In", values=["blah"])]
        )
    )
    assert selector.matches({"test": "blah"})
    assert not selector.matches({"test": "other"})
    assert not selector.matches({})


def test_not_in_exists_and_does_not_exist():
    selector = label_selector_as_selector(
        LabelSelector(
            match_expressions=[
                LabelSelectorRequirement(key="env", operator="NotIn", values=["prod"]),
                LabelSelectorRequirement(key="team", operator="Exists"),
                LabelSelectorRequirement(key="legacy", operator="DoesNotExist"),
            ]
        )
    )
    assert selector.matches({"team": "db", "env": "dev"})
    assert selector.matches({"team": "db"})
    assert not selector.matches({"team": "db", "env": "prod"})
    assert not selector.matches({"env": "dev"})
    assert not selector.matches({"team": "db", "legacy": "yes"})


def test_match_labels():
    selector = label_selector_as_selector(LabelSelector(match_labels={"tier": "db"}))
    assert selector.matches({"tier": "db", "other": "x"})
    assert not selector.matches({"tier": "web"})


def test_null_selector_matches_nothing_and_empty_matches_everything():
    assert not label_selector_as_selector(None).matches({"a": "b"})
    assert label_selector_as_selector(LabelSelector()).matches({"a": "b"})
    assert label_selector_as_selector(LabelSelector()).matches({})


def test_unknown_operator_is_rejected():
    selector = LabelSelector(match_expressions=[LabelSelectorRequirement(key="a", operator="Foo")])
    with pytest.raises(ValueError, match="not a valid pod selector operator"):
        label_selector_as_selector(selector)


def test_exists_with_values_is_rejected():
    selector = LabelSelector(
        match_expressions=[LabelSelectorRequirement(key="a", operator="Exists", values=["x"])]
    )
    with pytest.raises(InvalidFieldError, match="values set must be empty"):
        label_selector_as_selector(selector)


def test_invalid_key_is_rejected():
    selector = LabelSelector(
        match_expressions=[LabelSelectorRequirement(key="-bad-", operator="Exists")]
    )
    with pytest.raises(InvalidFieldError) as info:
        label_selector_as_selector(selector)
    assert info.value.field == "key"


def test_invalid_label_value_is_rejected():
    with pytest.raises(InvalidFieldError) as info:
        label_selector_as_selector(LabelSelector(match_labels={"a": "bad value!"}))
    assert info.value.field == "values[0]"


def test_set_status_condition_appends_copy_with_time():
    conditions = []
    new = Condition(type="InventoryReady", status=CONDITION_TRUE, reason="Ready")
    set_status_condition(conditions, new)
    found = find_status_condition(conditions, "InventoryReady")
    assert found is not None and found is not new
    assert found.reason == "Ready"
    assert found.last_transition_time is not None
    assert find_status_condition(conditions, "SpecSynced") is None


def test_set_status_condition_keeps_time_when_status_unchanged():
    stamp = datetime(2023, 1, 1, tzinfo=timezone.utc)
    conditions = [Condition(type="PolicyReady", status=CONDITION_TRUE, reason="Ready", last_transition_time=stamp)]
    set_status_condition(conditions, Condition(type="PolicyReady", status=CONDITION_TRUE, reason="Other", message="m"))
    assert len(conditions) == 1
    assert conditions[0].last_transition_time == stamp
    assert conditions[0].reason == "Other"
    assert conditions[0].message == "m"


def test_set_status_condition_moves_time_on_status_change():
    stamp = datetime(2023, 1, 1, tzinfo=timezone.utc)
    conditions = [Condition(type="PolicyReady", status=CONDITION_TRUE, last_transition_time=stamp)]
    set_status_condition(conditions, Condition(type="PolicyReady", status=CONDITION_FALSE))
    assert conditions[0].status == CONDITION_FALSE
    assert conditions[0].last_transition_time > stamp


def test_not_found_and_conflict_errors():
    err = NotFoundError("dbaasproviders", "missing")
    assert isinstance(err, LookupError)
    assert err.name == "missing"
    assert "missing" in str(err)
    with pytest.raises(ConflictError):
        raise ConflictError("object modified")