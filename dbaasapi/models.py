"""Resource models of the DBaaS API: providers, inventories, connections, instances, policies, platforms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .constants import (
    InstancePhase,
    PlatformInstlnStatus,
    PlatformName,
    PlatformType,
    ProvisioningParameterType,
)
from .meta import (
    API_GROUP,
    GROUP_VERSION,
    Condition,
    GroupVersion,
    LabelSelector,
    parse_group_version,
)

DEFAULT_PROVIDER_GROUP_VERSION = f"{API_GROUP}/v1alpha1"
DEFAULT_SYNC_PERIOD_MINUTES = 180
SYNC_PERIOD_MIN = 1
SYNC_PERIOD_MAX = 1440


# ---------------------------------------------------------------------------
# Common object metadata and references


@dataclass
class ObjectMeta:
    """Identifying metadata shared by all stored objects."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    generation: int = 0
    uid: str = ""


@dataclass
class NamespacedName:
    """The namespace and name of a resource."""

    namespace: str = ""
    name: str = ""


@dataclass
class LocalObjectReference:
    """A reference to an object in the same namespace."""

    name: str = ""


class _Resource:
    """Shortcuts to the name and namespace held in ``metadata``."""

    metadata: ObjectMeta
    kind: ClassVar[str] = ""
    api_version: ClassVar[str] = str(GROUP_VERSION)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace


@dataclass
class Secret(_Resource):
    """A secret holding binary values by key."""

    kind: ClassVar[str] = "Secret"
    api_version: ClassVar[str] = "v1"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    data: dict[str, bytes] = field(default_factory=dict)


@dataclass
class Namespace(_Resource):
    """A cluster namespace."""

    kind: ClassVar[str] = "Namespace"
    api_version: ClassVar[str] = "v1"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)


@dataclass
class _ConditionsStatus:
    conditions: list[Condition] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Providers


@dataclass
class ProviderIcon:
    """An icon given as base64 data with its media type."""

    data: str = ""
    media_type: str = ""


@dataclass
class DatabaseProviderInfo:
    """Descriptive information about a database provider."""

    name: str = ""
    display_name: str = ""
    display_description: str = ""
    icon: ProviderIcon = field(default_factory=ProviderIcon)


@dataclass
class CredentialField:
    """A credential the user interface collects for a provider account."""

    key: str = ""
    display_name: str = ""
    type: str = ""
    required: bool = False
    help_text: str = ""


@dataclass
class Option:
    """A choice offered in a dropdown, radio button or checkbox."""

    value: str = ""
    display_value: str = ""


@dataclass
class FieldDependency:
    """A provisioning field and the value it must hold."""

    field: ProvisioningParameterType | None = None
    value: str = ""


@dataclass
class ConditionalProvisioningParameterData:
    """Options and a default value that apply when all dependencies hold."""

    dependencies: list[FieldDependency] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)
    default_value: str = ""


@dataclass
class ProvisioningParameter:
    """How the user interface presents one provisioning parameter."""

    display_name: str = ""
    help_text: str = ""
    conditional_data: list[ConditionalProvisioningParameterData] = field(default_factory=list)


@dataclass
class DBaaSProviderSpec:
    """The desired state of a provider registration."""

    provider: DatabaseProviderInfo = field(default_factory=DatabaseProviderInfo)
    group_version: str = DEFAULT_PROVIDER_GROUP_VERSION
    inventory_kind: str = ""
    connection_kind: str = ""
    instance_kind: str = ""
    credential_fields: list[CredentialField] = field(default_factory=list)
    allows_free_trial: bool = False
    external_provision_url: str = field(default="", metadata={"go_name": "ExternalProvisionURL"})
    external_provision_description: str = ""
    provisioning_parameters: dict[ProvisioningParameterType, ProvisioningParameter] = field(
        default_factory=dict
    )


@dataclass
class DBaaSProvider(_Resource):
    """A cluster-wide registration of a database provider."""

    kind: ClassVar[str] = "DBaaSProvider"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DBaaSProviderSpec = field(default_factory=DBaaSProviderSpec)
    status: _ConditionsStatus = field(default_factory=_ConditionsStatus)

    def api_group_version(self) -> GroupVersion:
        """The DBaaS API group version the provider speaks; v1alpha1 when unset or invalid."""
        if self.spec.group_version:
            try:
                return parse_group_version(self.spec.group_version)
            except ValueError:
                pass
        return GroupVersion(GROUP_VERSION.group, "v1alpha1")


# ---------------------------------------------------------------------------
# Inventories and policies


@dataclass
class DatabaseService:
    """A database service discovered through a provider account."""

    service_id: str = field(default="", metadata={"go_name": "ServiceID"})
    service_name: str = ""
    service_type: str | None = None
    service_info: dict[str, str] = field(default_factory=dict)


@dataclass
class Instance:
    """A database instance within a database service."""

    instance_id: str = field(default="", metadata={"go_name": "InstanceID"})
    name: str = ""
    instance_info: dict[str, str] = field(default_factory=dict)


@dataclass
class DBaaSConnectionPolicy:
    """Which namespaces may reference a policy's inventories.

    ``namespaces`` may hold ``"*"`` for all namespaces; an empty ``ns_selector``
    matches every namespace while a missing one matches none.
    """

    namespaces: list[str] | None = None
    ns_selector: LabelSelector | None = None


@dataclass
class DBaaSInventoryPolicy:
    """Provisioning and connection rules for inventories."""

    disable_provisions: bool | None = None
    connections: DBaaSConnectionPolicy = field(default_factory=DBaaSConnectionPolicy)


@dataclass
class DBaaSPolicy(_Resource):
    """Enables DBaaS administration in a namespace and sets a default inventory policy."""

    kind: ClassVar[str] = "DBaaSPolicy"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DBaaSInventoryPolicy = field(default_factory=DBaaSInventoryPolicy)
    status: _ConditionsStatus = field(default_factory=_ConditionsStatus)


@dataclass
class DBaaSOperatorInventorySpec:
    """The desired state of a provider account."""

    provider_ref: NamespacedName = field(default_factory=NamespacedName)
    credentials_ref: LocalObjectReference | None = None
    policy: DBaaSInventoryPolicy | None = None


@dataclass
class DBaaSInventoryStatus:
    """The observed state of a provider account."""

    conditions: list[Condition] = field(default_factory=list)
    database_services: list[DatabaseService] = field(default_factory=list)


@dataclass
class DBaaSInventory(_Resource):
    """A provider account; it lives in a namespace that holds a policy."""

    kind: ClassVar[str] = "DBaaSInventory"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DBaaSOperatorInventorySpec = field(default_factory=DBaaSOperatorInventorySpec)
    status: DBaaSInventoryStatus = field(default_factory=DBaaSInventoryStatus)


# ---------------------------------------------------------------------------
# Connections and instances


@dataclass
class DBaaSConnectionSpec:
    """The desired state of a database connection."""

    inventory_ref: NamespacedName = field(default_factory=NamespacedName)
    database_service_id: str = field(default="", metadata={"go_name": "DatabaseServiceID"})
    database_service_ref: NamespacedName | None = None
    database_service_type: str | None = None


@dataclass
class DBaaSConnectionStatus:
    """The observed state of a database connection."""

    conditions: list[Condition] = field(default_factory=list)
    credentials_ref: LocalObjectReference | None = None
    connection_info_ref: LocalObjectReference | None = None


@dataclass
class DBaaSConnection(_Resource):
    """A connection to a database service of a provider account."""

    kind: ClassVar[str] = "DBaaSConnection"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DBaaSConnectionSpec = field(default_factory=DBaaSConnectionSpec)
    status: DBaaSConnectionStatus = field(default_factory=DBaaSConnectionStatus)


@dataclass
class DBaaSInstanceSpec:
    """The desired state of a provisioned database instance."""

    inventory_ref: NamespacedName = field(default_factory=NamespacedName)
    provisioning_parameters: dict[ProvisioningParameterType, str] = field(default_factory=dict)


@dataclass
class DBaaSInstanceStatus:
    """The observed state of a provisioned database instance."""

    conditions: list[Condition] = field(default_factory=list)
    instance_id: str = field(default="", metadata={"go_name": "InstanceID"})
    instance_info: dict[str, str] = field(default_factory=dict)
    phase: InstancePhase = InstancePhase.UNKNOWN


@dataclass
class DBaaSInstance(_Resource):
    """A database instance provisioned through a provider account."""

    kind: ClassVar[str] = "DBaaSInstance"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DBaaSInstanceSpec = field(default_factory=DBaaSInstanceSpec)
    status: DBaaSInstanceStatus = field(default_factory=DBaaSInstanceStatus)


# ---------------------------------------------------------------------------
# Platform


@dataclass
class PlatformConfig:
    """Parameters for installing one platform component."""

    name: str = ""
    csv: str = ""
    deployment_name: str = ""
    image: str = ""
    package_name: str = ""
    channel: str = ""
    display_name: str = ""
    envs: dict[str, str] = field(default_factory=dict)
    type: PlatformType = PlatformType.QUICK_START


@dataclass
class ObservabilityConfig:
    """Parameters for shipping metrics to a remote observatorium."""

    auth_type: str = ""
    remote_writes_url: str = ""
    rhsso_token_url: str = ""
    addon_name: str = ""
    rhobs_secret_name: str = ""


@dataclass
class PlatformStatus:
    """The installation status of one platform component."""

    platform_name: PlatformName
    platform_status: PlatformInstlnStatus
    last_message: str = ""


@dataclass
class DBaaSPlatformSpec:
    """The desired state of the platform; ``sync_period`` is in minutes."""

    sync_period: int | None = None

    def __post_init__(self) -> None:
        if self.sync_period is not None and not (
            SYNC_PERIOD_MIN <= self.sync_period <= SYNC_PERIOD_MAX
        ):
            raise ValueError(
                f"syncPeriod must be between {SYNC_PERIOD_MIN} and {SYNC_PERIOD_MAX}, "
                f"got {self.sync_period}"
            )

    @property
    def effective_sync_period(self) -> int:
        return DEFAULT_SYNC_PERIOD_MINUTES if self.sync_period is None else self.sync_period


@dataclass
class DBaaSPlatformStatus:
    """The observed state of the platform."""

    conditions: list[Condition] = field(default_factory=list)
    platforms_status: list[PlatformStatus] = field(default_factory=list)


@dataclass
class DBaaSPlatform(_Resource):
    """The installation of the DBaaS platform components."""

    kind: ClassVar[str] = "DBaaSPlatform"

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DBaaSPlatformSpec = field(default_factory=DBaaSPlatformSpec)
    status: DBaaSPlatformStatus = field(default_factory=DBaaSPlatformStatus)