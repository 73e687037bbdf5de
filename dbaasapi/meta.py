"""Core API machinery: group versions, label selectors, conditions and field errors."""

from __future__ import annotations

import dataclasses
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, MutableSequence, Sequence

API_GROUP = "dbaas.redhat.com"

CONDITION_TRUE = "True"
CONDITION_FALSE = "False"
CONDITION_UNKNOWN = "Unknown"

_TYPE_QUALIFIER = "v1beta1"


@dataclass(frozen=True)
class GroupVersion:
    """An API group paired with a version."""

    group: str = ""
    version: str = ""

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version


GROUP_VERSION = GroupVersion(API_GROUP, "v1beta1")


def parse_group_version(value: str) -> GroupVersion:
    """Parse ``group/version`` or a bare ``version`` string."""
    if not value or value == "/":
        return GroupVersion()
    parts = value.split("/")
    if len(parts) == 1:
        return GroupVersion("", parts[0])
    if len(parts) == 2:
        return GroupVersion(parts[0], parts[1])
    raise ValueError(f"unexpected GroupVersion string: {value}")


# ---------------------------------------------------------------------------
# Field paths and validation errors


@dataclass(frozen=True)
class FieldPath:
    """A dotted path to a field within an object, e.g. ``spec.inventoryRef``."""

    name: str
    parent: FieldPath | None = None

    def child(self, name: str) -> FieldPath:
        return FieldPath(name, self)

    def _index(self, index: int) -> FieldPath:
        return FieldPath(f"[{index}]", self)

    def __str__(self) -> str:
        segments: list[str] = []
        node: FieldPath | None = self
        while node is not None:
            segments.append(node.name)
            node = node.parent
        text = ""
        for segment in reversed(segments):
            if text and not segment.startswith("["):
                text += "."
            text += segment
        return text


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _go_field_name(f: dataclasses.Field) -> str:
    override = f.metadata.get("go_name")
    if override:
        return override
    return "".join(part[:1].upper() + part[1:] for part in f.name.split("_"))


def _format_nested(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _format_nested(value.value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, Mapping):
        if not value:
            return "map[string]string(nil)"
        items = ", ".join(
            f"{_format_nested(k)}:{_format_nested(v)}" for k, v in sorted(value.items())
        )
        return f"map[string]string{{{items}}}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]string(nil)"
        return "[]string{" + ", ".join(_format_nested(v) for v in value) + "}"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        body = ", ".join(
            f"{_go_field_name(f)}:{_format_nested(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{_TYPE_QUALIFIER}.{type(value).__name__}{{{body}}}"
    return str(value)


def format_value(value: Any) -> str:
    """Render a rejected value the way field errors report it."""
    if value is None:
        return _quote("null")
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return _quote(value)
    return _format_nested(value)


class InvalidFieldError(ValueError):
    """A field holds a value that is not allowed."""

    def __init__(self, path: FieldPath | str, value: Any, detail: str) -> None:
        self.field = str(path)
        self.bad_value = value
        self.detail = detail
        super().__init__(f"{self.field}: Invalid value: {format_value(value)}: {detail}")


class NotFoundError(LookupError):
    """A requested resource does not exist."""

    def __init__(self, resource: str, name: str) -> None:
        self.resource = resource
        self.name = name
        super().__init__(f'{resource} "{name}" not found')


class ConflictError(Exception):
    """An object was modified concurrently and the operation must be retried."""


# ---------------------------------------------------------------------------
# Label selectors


@dataclass
class LabelSelectorRequirement:
    """A single ``key operator values`` expression of a label selector."""

    key: str
    operator: str
    values: list[str] | None = None


@dataclass
class LabelSelector:
    """A label query combining exact label matches and expressions."""

    match_labels: dict[str, str] = field(default_factory=dict)
    match_expressions: list[LabelSelectorRequirement] = field(default_factory=list)


class _Op(Enum):
    IN = "in"
    NOT_IN = "notin"
    EXISTS = "exists"
    DOES_NOT_EXIST = "!"
    EQUALS = "="


_SELECTOR_OPERATORS = {
    "In": _Op.IN,
    "NotIn": _Op.NOT_IN,
    "Exists": _Op.EXISTS,
    "DoesNotExist": _Op.DOES_NOT_EXIST,
}

_QUALIFIED_NAME_RE = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_DNS_SUBDOMAIN_RE = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*"
)
_NAME_MAX = 63
_SUBDOMAIN_MAX = 253


def _qualified_name_errors(key: str) -> list[str]:
    parts = key.split("/")
    if len(parts) == 1:
        name = parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix:
            return ["prefix part must be non-empty"]
        if len(prefix) > _SUBDOMAIN_MAX:
            return [f"prefix part must be no more than {_SUBDOMAIN_MAX} characters"]
        if not _DNS_SUBDOMAIN_RE.fullmatch(prefix):
            return ["prefix part must be a lowercase RFC 1123 subdomain"]
    else:
        return [
            "a qualified name must consist of alphanumeric characters, '-', '_' or '.', "
            "with an optional DNS subdomain prefix and '/'"
        ]
    if not name:
        return ["name part must be non-empty"]
    if len(name) > _NAME_MAX:
        return [f"name part must be no more than {_NAME_MAX} characters"]
    if not _QUALIFIED_NAME_RE.fullmatch(name):
        return [
            "name part must consist of alphanumeric characters, '-', '_' or '.', "
            "and must start and end with an alphanumeric character"
        ]
    return []


def _label_value_errors(value: str) -> list[str]:
    if len(value) > _NAME_MAX:
        return [f"must be no more than {_NAME_MAX} characters"]
    if value and not _QUALIFIED_NAME_RE.fullmatch(value):
        return [
            "a valid label must be an empty string or consist of alphanumeric characters, "
            "'-', '_' or '.', and must start and end with an alphanumeric character"
        ]
    return []


@dataclass(frozen=True)
class _Requirement:
    key: str
    op: _Op
    values: tuple[str, ...]

    @classmethod
    def build(cls, key: str, op: _Op, values: Sequence[str] | None) -> _Requirement:
        key_errors = _qualified_name_errors(key)
        if key_errors:
            raise InvalidFieldError(FieldPath("key"), key, "; ".join(key_errors))
        value_path = FieldPath("values")
        count = len(values or ())
        if op in (_Op.IN, _Op.NOT_IN) and count == 0:
            raise InvalidFieldError(
                value_path, list(values or ()), "for 'in', 'notin' operators, values set can't be empty"
            )
        if op is _Op.EQUALS and count != 1:
            raise InvalidFieldError(
                value_path, list(values or ()), "exact-match compatibility requires one single value"
            )
        if op in (_Op.EXISTS, _Op.DOES_NOT_EXIST) and count != 0:
            raise InvalidFieldError(
                value_path, list(values or ()), "values set must be empty for exists and does not exist"
            )
        for position, value in enumerate(values or ()):
            errors = _label_value_errors(value)
            if errors:
                raise InvalidFieldError(value_path._index(position), value, "; ".join(errors))
        return cls(key, op, tuple(values or ()))

    def matches(self, labels: Mapping[str, str]) -> bool:
        present = self.key in labels
        if self.op in (_Op.IN, _Op.EQUALS):
            return present and labels[self.key] in self.values
        if self.op is _Op.NOT_IN:
            return not present or labels[self.key] not in self.values
        if self.op is _Op.EXISTS:
            return present
        return not present


@dataclass(frozen=True)
class Selector:
    """A compiled label selector; every requirement must hold for a match."""

    requirements: tuple[_Requirement, ...] = ()
    matches_nothing: bool = False

    def matches(self, labels: Mapping[str, str] | None) -> bool:
        if self.matches_nothing:
            return False
        labels = labels or {}
        return all(requirement.matches(labels) for requirement in self.requirements)


def label_selector_as_selector(selector: LabelSelector | None) -> Selector:
    """Compile a label selector, raising on malformed expressions.

    A missing selector matches nothing; an empty one matches everything.
    """
    if selector is None:
        return Selector(matches_nothing=True)
    if not selector.match_labels and not selector.match_expressions:
        return Selector()
    requirements = [
        _Requirement.build(key, _Op.EQUALS, [value])
        for key, value in selector.match_labels.items()
    ]
    for expression in selector.match_expressions:
        op = _SELECTOR_OPERATORS.get(expression.operator)
        if op is None:
            raise ValueError(f"{_quote(expression.operator)} is not a valid pod selector operator")
        requirements.append(_Requirement.build(expression.key, op, expression.values))
    requirements.sort(key=lambda requirement: requirement.key)
    return Selector(tuple(requirements))


# ---------------------------------------------------------------------------
# Status conditions


@dataclass
class Condition:
    """One aspect of an object's observed state."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    observed_generation: int = 0
    last_transition_time: datetime | None = None


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def find_status_condition(
    conditions: Sequence[Condition] | None, condition_type: str
) -> Condition | None:
    """Return the condition of the given type, or None."""
    return next((c for c in conditions or () if c.type == condition_type), None)


def set_status_condition(conditions: MutableSequence[Condition] | None, condition: Condition) -> None:
    """Add or update a condition in place, moving its transition time only on status change."""
    if conditions is None:
        return
    existing = find_status_condition(conditions, condition.type)
    if existing is None:
        added = dataclasses.replace(condition)
        if added.last_transition_time is None:
            added.last_transition_time = _now()
        conditions.append(added)
        return
    if existing.status != condition.status:
        existing.status = condition.status
        existing.last_transition_time = condition.last_transition_time or _now()
    existing.reason = condition.reason
    existing.message = condition.message
    existing.observed_generation = condition.observed_generation