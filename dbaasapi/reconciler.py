"""Decisions shared by the DBaaS reconcilers: namespace access, provisioning and provider objects."""

from __future__ import annotations

import dataclasses
import os
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Sequence

from .constants import RDS_REGISTRATION, TYPE_LABEL_KEY, TYPE_LABEL_KEY_MONGO, TYPE_LABEL_VALUE
from .meta import API_GROUP, GROUP_VERSION, GroupVersion, LabelSelector, label_selector_as_selector
from .models import DBaaSInventory, DBaaSPolicy, DBaaSProvider, Namespace, Secret

INSTALL_NAMESPACE_ENV_VAR = "INSTALL_NAMESPACE"
ALL_NAMESPACES = "*"

V1ALPHA1_GROUP_VERSION = GroupVersion(API_GROUP, "v1alpha1")


def contains(values: Iterable[str] | None, item: str) -> bool:
    """Whether ``item`` is one of ``values``; a missing collection holds nothing."""
    return item in (values or ())


def can_provision(inventory: DBaaSInventory, active_policy: DBaaSPolicy | None) -> bool:
    """Whether instances may be provisioned against an inventory.

    The inventory's own policy takes precedence over the namespace's active policy.
    Without an active policy the namespace is not a DBaaS namespace at all.
    """
    if active_policy is None:
        return False
    if inventory.spec.policy is not None:
        disabled = inventory.spec.policy.disable_provisions
    else:
        disabled = active_policy.spec.disable_provisions
    return True if disabled is None else not disabled


def _connection_rules(
    inventory: DBaaSInventory, active_policy: DBaaSPolicy | None
) -> tuple[list[str], LabelSelector | None]:
    if inventory.spec.policy is not None:
        connections = inventory.spec.policy.connections
    elif active_policy is not None:
        connections = active_policy.spec.connections
    else:
        return [], None
    return list(connections.namespaces or ()), connections.ns_selector


def is_valid_connection_ns(
    namespace: str,
    inventory: DBaaSInventory,
    active_policy: DBaaSPolicy | None,
    list_namespaces: Callable[[], Iterable[Namespace]],
) -> bool:
    """Whether objects in ``namespace`` may reference ``inventory``.

    The inventory's namespace is always allowed. Otherwise the namespaces and the
    namespace selector of the inventory's policy, or failing that of the active
    policy, decide. ``list_namespaces`` is called only when a selector must be
    evaluated; a malformed selector raises.
    """
    if namespace == inventory.namespace:
        return True
    valid_namespaces, ns_selector = _connection_rules(inventory, active_policy)
    if contains(valid_namespaces, ALL_NAMESPACES) or contains(valid_namespaces, namespace):
        return True
    if ns_selector is not None:
        selector = label_selector_as_selector(ns_selector)
        valid_namespaces.extend(
            ns.name for ns in list_namespaces() if selector.matches(ns.metadata.labels)
        )
    return contains(valid_namespaces, namespace)


def get_install_namespace(environ: Mapping[str, str] | None = None) -> str:
    """The namespace the operator is installed in, read from the environment."""
    env = os.environ if environ is None else environ
    try:
        return env[INSTALL_NAMESPACE_ENV_VAR]
    except KeyError:
        raise LookupError(f"{INSTALL_NAMESPACE_ENV_VAR} must be set") from None


def provider_spec_status_version(provider: DBaaSProvider) -> GroupVersion:
    """The API version in which the provider's spec and status are expressed."""
    if str(provider.api_group_version()) == str(V1ALPHA1_GROUP_VERSION) and provider.name != RDS_REGISTRATION:
        return V1ALPHA1_GROUP_VERSION
    return GROUP_VERSION


def credentials_label_patch(inventory: DBaaSInventory, secret: Secret) -> dict[str, str]:
    """Labels that must be added to an inventory's credentials secret.

    MongoDB providers use their own label key. An empty result means the secret
    is labelled already, or the inventory names no credentials.
    """
    credentials = inventory.spec.credentials_ref
    if credentials is None or not credentials.name:
        return {}
    key = TYPE_LABEL_KEY_MONGO if "mongodb" in inventory.spec.provider_ref.name else TYPE_LABEL_KEY
    if secret.metadata.labels.get(key) == TYPE_LABEL_VALUE:
        return {}
    return {key: TYPE_LABEL_VALUE}


def _json_name(f: dataclasses.Field) -> str:
    override = f.metadata.get("go_name")
    if override:
        return override[:1].lower() + override[1:]
    head, *rest = f.name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            result[_json_name(f)] = _to_json(item)
        return result
    if isinstance(value, Mapping):
        return {_to_json(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    return value


def build_provider_object(
    obj: Any, group_version: GroupVersion, kind: str, spec: Any
) -> dict[str, Any]:
    """The provider-side object mirroring a DBaaS object, owned and controlled by it."""
    owner_reference = {
        "apiVersion": obj.api_version,
        "kind": obj.kind,
        "name": obj.name,
        "uid": obj.metadata.uid,
        "controller": True,
        "blockOwnerDeletion": True,
    }
    return {
        "apiVersion": str(group_version),
        "kind": kind,
        "metadata": {
            "name": obj.name,
            "namespace": obj.namespace,
            "ownerReferences": [owner_reference],
        },
        "spec": _to_json(spec),
    }


def _names(items: Sequence[Namespace]) -> list[str]:
    return [ns.name for ns in items]