import pytest

from dbaasapi.constants import (
    MONGODB_ATLAS_REGISTRATION,
    RDS_REGISTRATION,
    TYPE_LABEL_KEY,
    TYPE_LABEL_KEY_MONGO,
    TYPE_LABEL_VALUE,
)
from dbaasapi.meta import GROUP_VERSION, GroupVersion, InvalidFieldError, LabelSelector, LabelSelectorRequirement
from dbaasapi.models import (
    DBaaSConnection,
    DBaaSConnectionPolicy,
    DBaaSConnectionSpec,
    DBaaSInventory,
    DBaaSInventoryPolicy,
    DBaaSOperatorInventorySpec,
    DBaaSPolicy,
    DBaaSProvider,
    DBaaSProviderSpec,
    LocalObjectReference,
    Namespace,
    NamespacedName,
    ObjectMeta,
    Secret,
)
from dbaasapi.reconciler import (
    build_provider_object,
    can_provision,
    contains,
    get_install_namespace,
    is_valid_connection_ns,
    provider_spec_status_version,
    credentials_label_patch,
)


def _inventory(policy=None, provider="crunchy-bridge-registration", creds="creds"):
    return DBaaSInventory(
        metadata=ObjectMeta(name="inv", namespace="home"),
        spec=DBaaSOperatorInventorySpec(
            provider_ref=NamespacedName(name=provider),
            credentials_ref=LocalObjectReference(creds) if creds is not None else None,
            policy=policy,
        ),
    )


def _policy(disable=None, namespaces=None, selector=None):
    return DBaaSPolicy(
        metadata=ObjectMeta(name="pol", namespace="home"),
        spec=DBaaSInventoryPolicy(
            disable_provisions=disable,
            connections=DBaaSConnectionPolicy(namespaces=namespaces, ns_selector=selector),
        ),
    )


def _namespaces():
    return [
        Namespace(metadata=ObjectMeta(name="team-a", labels={"team": "a"})),
        Namespace(metadata=ObjectMeta(name="team-b", labels={"team": "b"})),
    ]


def _no_listing():
    raise AssertionError("namespaces should not be listed")


def test_contains():
    assert contains(["a", "b"], "b") is True
    assert contains(["a", "b"], "c") is False
    assert contains(None, "a") is False


def test_can_provision_without_active_policy():
    assert can_provision(_inventory(), None) is False


def test_can_provision_defaults_to_true():
    assert can_provision(_inventory(), _policy()) is True


def test_can_provision_uses_active_policy():
    assert can_provision(_inventory(), _policy(disable=True)) is False


def test_can_provision_inventory_policy_takes_precedence():
    inventory = _inventory(policy=DBaaSInventoryPolicy(disable_provisions=False))
    assert can_provision(inventory, _policy(disable=True)) is True
    inventory = _inventory(policy=DBaaSInventoryPolicy())
    assert can_provision(inventory, _policy(disable=True)) is True


def test_same_namespace_always_valid():
    assert is_valid_connection_ns("home", _inventory(), None, _no_listing) is True


def test_other_namespace_invalid_without_policy():
    assert is_valid_connection_ns("team-a", _inventory(), None, _no_listing) is False


def test_wildcard_allows_all():
    assert is_valid_connection_ns("anything", _inventory(), _policy(namespaces=["*"]), _no_listing) is True


def test_listed_namespace_allowed():
    policy = _policy(namespaces=["team-a"])
    assert is_valid_connection_ns("team-a", _inventory(), policy, _no_listing) is True
    assert is_valid_connection_ns("team-b", _inventory(), policy, _namespaces) is False


def test_selector_matches_namespace_labels():
    selector = LabelSelector(match_labels={"team": "a"})
    policy = _policy(selector=selector)
    assert is_valid_connection_ns("team-a", _inventory(), policy, _namespaces) is True
    assert is_valid_connection_ns("team-b", _inventory(), policy, _namespaces) is False


def test_empty_selector_matches_all_namespaces():
    policy = _policy(selector=LabelSelector())
    assert is_valid_connection_ns("team-b", _inventory(), policy, _namespaces) is True


def test_inventory_policy_overrides_active_policy():
    inventory = _inventory(
        policy=DBaaSInventoryPolicy(connections=DBaaSConnectionPolicy(namespaces=["team-b"]))
    )
    active = _policy(namespaces=["*"])
    assert is_valid_connection_ns("team-a", inventory, active, lambda: []) is False
    assert is_valid_connection_ns("team-b", inventory, active, _no_listing) is True


def test_malformed_selector_raises():
    selector = LabelSelector(match_expressions=[LabelSelectorRequirement(key="test", operator="In")])
    with pytest.raises(InvalidFieldError) as info:
        is_valid_connection_ns("team-a", _inventory(), _policy(selector=selector), _namespaces)
    assert str(info.value) == (
        "values: Invalid value: []string(nil): for 'in', 'notin' operators, values set can't be empty"
    )


def test_get_install_namespace():
    assert get_install_namespace({"INSTALL_NAMESPACE": "operators"}) == "operators"


def test_get_install_namespace_missing():
    with pytest.raises(LookupError, match="INSTALL_NAMESPACE must be set"):
        get_install_namespace({})


def _provider(name, group_version):
    return DBaaSProvider(
        metadata=ObjectMeta(name=name),
        spec=DBaaSProviderSpec(group_version=group_version),
    )


def test_status_version_v1alpha1_provider():
    result = provider_spec_status_version(_provider("crunchy", "dbaas.redhat.com/v1alpha1"))
    assert result == GroupVersion(GROUP_VERSION.group, "v1alpha1")


def test_status_version_rds_is_v1beta1():
    assert provider_spec_status_version(_provider(RDS_REGISTRATION, "dbaas.redhat.com/v1alpha1")) == GROUP_VERSION


def test_status_version_v1beta1_provider():
    assert provider_spec_status_version(_provider("crunchy", str(GROUP_VERSION))) == GROUP_VERSION


def test_label_patch_generic_provider():
    creds_resource = Secret(metadata=ObjectMeta(name="creds", namespace="home"))
    assert credentials_label_patch(_inventory(), creds_resource) == {TYPE_LABEL_KEY: TYPE_LABEL_VALUE}


def test_label_patch_mongodb_provider():
    creds_resource = Secret(metadata=ObjectMeta(name="creds", namespace="home"))
    inventory = _inventory(provider=MONGODB_ATLAS_REGISTRATION)
    assert credentials_label_patch(inventory, creds_resource) == {TYPE_LABEL_KEY_MONGO: TYPE_LABEL_VALUE}


def test_label_patch_already_labelled():
    creds_resource = Secret(metadata=ObjectMeta(name="creds", labels={TYPE_LABEL_KEY: TYPE_LABEL_VALUE}))
    assert credentials_label_patch(_inventory(), creds_resource) == {}


def test_label_patch_without_credentials():
    creds_resource = Secret(metadata=ObjectMeta(name="creds"))
    assert credentials_label_patch(_inventory(creds=None), creds_resource) == {}
    assert credentials_label_patch(_inventory(creds=""), creds_resource) == {}


def test_build_provider_object():
    connection = DBaaSConnection(
        metadata=ObjectMeta(name="conn", namespace="apps", uid="uid-1"),
        spec=DBaaSConnectionSpec(
            inventory_ref=NamespacedName(namespace="home", name="inv"),
            database_service_id="svc-1",
        ),
    )
    gv = GroupVersion(GROUP_VERSION.group, "v1alpha1")
    result = build_provider_object(connection, gv, "CrunchyBridgeConnection", connection.spec)
    assert result["apiVersion"] == "dbaas.redhat.com/v1alpha1"
    assert result["kind"] == "CrunchyBridgeConnection"
    assert result["metadata"]["name"] == "conn"
    assert result["metadata"]["namespace"] == "apps"
    owner = result["metadata"]["ownerReferences"][0]
    assert owner["kind"] == "DBaaSConnection"
    assert owner["apiVersion"] == str(GROUP_VERSION)
    assert owner["uid"] == "uid-1"
    assert owner["controller"] is True
    assert result["spec"] == {
        "inventoryRef": {"namespace": "home", "name": "inv"},
        "databaseServiceID": "svc-1",
    }