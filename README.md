# dbaasapi

Data models, admission checks and policy decisions for a
database-as-a-service control plane: provider registrations, provider
accounts (inventories), database connections, provisioned instances,
namespace policies and platform installation status.

## Modules

- `dbaasapi.meta`: the API machinery the other modules build on.
  - `GroupVersion` and `parse_group_version`, which accepts `group/version`
    or a bare `version` and raises `ValueError` on anything with more parts.
  - `LabelSelector`, `LabelSelectorRequirement` and
    `label_selector_as_selector`, which compiles a selector into a `Selector`
    with a `matches(labels)` method. A missing selector (`None`) matches
    nothing, an empty one matches everything, and malformed keys, values or
    operators raise.
  - `Condition`, `find_status_condition` and `set_status_condition`; the
    latter adds or updates a condition in a list in place and moves its
    transition time only when the status changes.
  - `FieldPath` (built with `child`), `InvalidFieldError`, `format_value`,
    `NotFoundError` and `ConflictError`.
- `dbaasapi.constants`: condition types, reasons and messages, credential
  label keys, provisioning plans, provider registration names, and the enums
  `PlatformName`, `PlatformType`, `PlatformInstlnStatus`,
  `ProvisioningParameterType` and `InstancePhase`.
- `dbaasapi.models`: dataclasses for `DBaaSProvider`, `DBaaSInventory`,
  `DBaaSConnection`, `DBaaSInstance`, `DBaaSPolicy`, `DBaaSPlatform`, their
  specs and statuses, and the supporting `ObjectMeta`, `NamespacedName`,
  `LocalObjectReference`, `Secret` and `Namespace`.
  `DBaaSProvider.api_group_version()` falls back to `v1alpha1` when the
  provider's group version is unset or invalid. `DBaaSPlatformSpec` rejects a
  `sync_period` outside 1–1440 minutes and defaults to 180.
- `dbaasapi.webhooks`: admission checks that return nothing on success and
  raise when a request must be rejected.
  - `validate_connection_create` and `validate_connection_update` (the
    service ID, inventory reference, service reference and service type are
    immutable).
  - `validate_policy`, which rejects a malformed namespace selector.
  - `InventoryValidator`, with `validate_create` and `validate_update`. It
    reads secrets, providers and existing inventories from a
    `ResourceClient`, an in-memory store filled through its constructor or
    `add()`. It checks that the provider name does not change, that the
    credentials secret and the provider exist, that only one RDS provider
    account is created, and, through
    `validate_inventory_mandatory_fields`, that every required credential is
    present in the secret.
- `dbaasapi.reconciler`: decisions shared by controllers.
  - `can_provision` and `is_valid_connection_ns`, where an inventory's own
    policy takes precedence over the namespace's active policy.
  - `credentials_label_patch`, the labels a credentials secret still needs.
  - `provider_spec_status_version` and `build_provider_object`, which builds
    the provider-side object as a dictionary with a controller owner
    reference.
  - `get_install_namespace`, which reads `INSTALL_NAMESPACE` from the
    environment and raises `LookupError` when it is not set.
  - `contains`.

## Installation

```
pip install .
```

Install the `test` extra (`pip install .[test]`) to run the tests with pytest.

## Example

```python
from dbaasapi.models import DBaaSConnection, DBaaSConnectionSpec, NamespacedName, ObjectMeta
from dbaasapi.meta import InvalidFieldError
from dbaasapi.webhooks import validate_connection_create

connection = DBaaSConnection(
    metadata=ObjectMeta(name="orders", namespace="default"),
    spec=DBaaSConnectionSpec(inventory_ref=NamespacedName(name="inv", namespace="default")),
)

try:
    validate_connection_create(connection)
except InvalidFieldError as err:
    print(err)
# spec.databaseServiceID: Invalid value: "": either databaseServiceID or databaseServiceRef must be specified
```

## What it does not do

The package holds no cluster client, runs no reconcile loop and serves no
admission endpoint. It does not store objects, watch for changes or update
statuses anywhere; `ResourceClient` is only an in-memory lookup table for the
inventory checks, and `is_valid_connection_ns` takes a callable that you
provide to list namespaces. Wiring these functions into a running control
plane is left to the caller.