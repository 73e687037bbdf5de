"""Admission checks for connections, policies and provider accounts."""

from __future__ import annotations

import logging
from typing import Iterable

from .constants import RDS_REGISTRATION
from .meta import FieldPath, InvalidFieldError, NotFoundError, label_selector_as_selector
from .models import (
    DBaaSConnection,
    DBaaSInventory,
    DBaaSPolicy,
    DBaaSProvider,
    Secret,
)

_connection_log = logging.getLogger("dbaasconnection-resource")
_inventory_log = logging.getLogger("dbaasinventory-resource")
_policy_log = logging.getLogger("dbaaspolicy-resource")

_SPEC = FieldPath("spec")


# ---------------------------------------------------------------------------
# Connections


def validate_connection_create(connection: DBaaSConnection) -> None:
    """Reject a new connection that names its database service wrongly."""
    _connection_log.info("validate create name=%s", connection.name)
    spec = connection.spec
    has_id = bool(spec.database_service_id)
    has_ref = spec.database_service_ref is not None and bool(spec.database_service_ref.name)
    if has_id and has_ref:
        raise InvalidFieldError(
            _SPEC.child("databaseServiceID"),
            spec.database_service_id,
            "both databaseServiceID and databaseServiceRef are specified",
        )
    if not has_id and not has_ref:
        raise InvalidFieldError(
            _SPEC.child("databaseServiceID"),
            spec.database_service_id,
            "either databaseServiceID or databaseServiceRef must be specified",
        )
    if spec.database_service_ref is not None and spec.database_service_type is not None:
        raise InvalidFieldError(
            _SPEC.child("databaseServiceRef"),
            spec.database_service_ref,
            "when using databaseServiceRef, databaseServiceType must not be specified",
        )


def validate_connection_update(connection: DBaaSConnection, old: DBaaSConnection) -> None:
    """Reject changes to the immutable fields of a connection."""
    _connection_log.info("validate update name=%s", connection.name)
    new, previous = connection.spec, old.spec
    checks = (
        ("databaseServiceID", new.database_service_id, previous.database_service_id),
        ("inventoryRef", new.inventory_ref, previous.inventory_ref),
        ("databaseServiceRef", new.database_service_ref, previous.database_service_ref),
        ("databaseServiceType", new.database_service_type, previous.database_service_type),
    )
    for name, current, before in checks:
        if current != before:
            raise InvalidFieldError(_SPEC.child(name), current, f"{name} is immutable")


# ---------------------------------------------------------------------------
# Policies


def validate_policy(policy: DBaaSPolicy) -> None:
    """Reject a policy whose namespace selector is malformed."""
    _policy_log.info("validate name=%s", policy.name)
    selector = policy.spec.connections.ns_selector
    if selector is not None:
        label_selector_as_selector(selector)


# ---------------------------------------------------------------------------
# Provider accounts


class ResourceClient:
    """An in-memory store of the secrets, providers and inventories the checks read."""

    def __init__(self, objects: Iterable[Secret | DBaaSProvider | DBaaSInventory] = ()) -> None:
        self._secrets: dict[tuple[str, str], Secret] = {}
        self._providers: dict[str, DBaaSProvider] = {}
        self._inventories: dict[tuple[str, str], DBaaSInventory] = {}
        for obj in objects:
            self.add(obj)

    def add(self, obj: Secret | DBaaSProvider | DBaaSInventory) -> None:
        """Store or replace an object."""
        if isinstance(obj, Secret):
            self._secrets[(obj.namespace, obj.name)] = obj
        elif isinstance(obj, DBaaSProvider):
            self._providers[obj.name] = obj
        elif isinstance(obj, DBaaSInventory):
            self._inventories[(obj.namespace, obj.name)] = obj
        else:
            raise TypeError(f"unsupported object type: {type(obj).__name__}")

    def get_secret(self, namespace: str, name: str) -> Secret:
        try:
            return self._secrets[(namespace, name)]
        except KeyError:
            raise NotFoundError("secrets", name) from None

    def get_provider(self, name: str) -> DBaaSProvider:
        try:
            return self._providers[name]
        except KeyError:
            raise NotFoundError("dbaasproviders.dbaas.redhat.com", name) from None

    def list_inventories_by_provider(self, provider_name: str) -> list[DBaaSInventory]:
        return [
            inventory
            for inventory in self._inventories.values()
            if inventory.spec.provider_ref.name == provider_name
        ]


class InventoryValidator:
    """Admission checks for provider accounts, backed by a resource client."""

    def __init__(self, client: ResourceClient) -> None:
        self.client = client

    def validate_create(self, inventory: DBaaSInventory) -> None:
        _inventory_log.info("validate create name=%s", inventory.name)
        self._validate(inventory, None)

    def validate_update(self, inventory: DBaaSInventory, old: DBaaSInventory) -> None:
        _inventory_log.info("validate update name=%s", inventory.name)
        self._validate(inventory, old)

    def _validate(self, inventory: DBaaSInventory, old: DBaaSInventory | None) -> None:
        provider_name = inventory.spec.provider_ref.name
        if old is not None and old.spec.provider_ref.name != provider_name:
            raise InvalidFieldError(
                _SPEC.child("providerRef").child("name"),
                provider_name,
                "provider name is immutable for provider accounts",
            )
        credentials = inventory.spec.credentials_ref
        secret = self.client.get_secret(
            inventory.namespace, credentials.name if credentials is not None else ""
        )
        provider = self.client.get_provider(provider_name)
        if old is None and provider_name == RDS_REGISTRATION:
            self._validate_single_rds()
        policy = inventory.spec.policy
        if policy is not None and policy.connections.ns_selector is not None:
            label_selector_as_selector(policy.connections.ns_selector)
        validate_inventory_mandatory_fields(inventory, secret, provider)

    def _validate_single_rds(self) -> None:
        existing = self.client.list_inventories_by_provider(RDS_REGISTRATION)
        if existing:
            raise ValueError(
                "only one provider account for RDS can exist in a cluster, "
                f"but there is already a provider account {existing[0].name} created"
            )


def validate_inventory_mandatory_fields(
    inventory: DBaaSInventory, secret: Secret, provider: DBaaSProvider
) -> None:
    """Require every mandatory provider credential to be set in the secret."""
    for credential in provider.spec.credential_fields:
        if credential.required and not secret.data.get(credential.key):
            raise InvalidFieldError(
                _SPEC.child("credentialsRef"),
                inventory.spec.credentials_ref,
                f"credentialsRef is invalid: {credential.key} is required in secret {secret.name}",
            )