"""Condition types, reasons, messages, labels and enumerations of the DBaaS API."""

from __future__ import annotations

from enum import Enum, IntEnum


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


# Condition types
DBAAS_INVENTORY_READY_TYPE = "InventoryReady"
DBAAS_INVENTORY_PROVIDER_SYNC_TYPE = "SpecSynced"
DBAAS_CONNECTION_READY_TYPE = "ConnectionReady"
DBAAS_CONNECTION_PROVIDER_SYNC_TYPE = "ReadyForBinding"
DBAAS_INSTANCE_READY_TYPE = "InstanceReady"
DBAAS_INSTANCE_PROVIDER_SYNC_TYPE = "ProvisionReady"
DBAAS_POLICY_READY_TYPE = "PolicyReady"
DBAAS_PLATFORM_READY_TYPE = "PlatformReady"

# Condition reasons
READY = "Ready"
DBAAS_POLICY_NOT_FOUND = "DBaaSPolicyNotFound"
DBAAS_POLICY_NOT_READY = "DBaaSPolicyNotReady"
DBAAS_PROVIDER_NOT_FOUND = "DBaaSProviderNotFound"
DBAAS_INVENTORY_NOT_FOUND = "DBaaSInventoryNotFound"
DBAAS_INVENTORY_NOT_READY = "DBaaSInventoryNotReady"
DBAAS_INVENTORY_NOT_PROVISIONABLE = "DBaaSInventoryNotProvisionable"
DBAAS_INVALID_NAMESPACE = "InvalidNamespace"
DBAAS_SERVICE_NOT_AVAILABLE = "DBaaSServiceNotAvailable"
PROVIDER_RECONCILE_INPROGRESS = "ProviderReconcileInprogress"
PROVIDER_RECONCILE_ERROR = "ProviderReconcileError"
PROVIDER_PARSING_ERROR = "ProviderParsingError"
INSTALLATION_INPROGRESS = "InstallationInprogress"
INSTALLATION_CLEANUP = "InstallationCleanup"

# Condition messages
MSG_PROVIDER_CR_STATUS_SYNC_DONE = "Provider Custom Resource status sync completed"
MSG_PROVIDER_CR_RECONCILE_IN_PROGRESS = "DBaaS Provider Custom Resource reconciliation in progress"
MSG_INVENTORY_NOT_READY = "Inventory discovery not done"
MSG_INVENTORY_NOT_PROVISIONABLE = "Inventory provisioning not allowed"
MSG_POLICY_NOT_FOUND = "Failed to find an active Policy"
MSG_POLICY_READY = "Policy is active"
MSG_INVALID_NAMESPACE = "Invalid connection namespace for the referenced inventory"
MSG_POLICY_NOT_READY = "Another active Policy already exists"

# Credential secret labels
TYPE_LABEL_VALUE = "credentials"
TYPE_LABEL_KEY = "db-operator/type"
TYPE_LABEL_KEY_MONGO = "atlas.mongodb.com/type"

# Provisioning plans
PROVISIONING_PLAN_FREE_TRIAL = "FREETRIAL"
PROVISIONING_PLAN_SERVERLESS = "SERVERLESS"
PROVISIONING_PLAN_DEDICATED = "DEDICATED"

# Supported provider registrations
COCKROACHDB_CLOUD_REGISTRATION = "cockroachdb-cloud-registration"
MONGODB_ATLAS_REGISTRATION = "mongodb-atlas-registration"
CRUNCHY_BRIDGE_REGISTRATION = "crunchy-bridge-registration"
RDS_REGISTRATION = "rds-registration"


class ProvisioningParameterType(_StrEnum):
    """Fields a provider may ask for when provisioning an instance."""

    NAME = "name"
    PLAN = "plan"
    CLOUD_PROVIDER = "cloudProvider"
    REGIONS = "regions"
    AVAILABILITY_ZONES = "availabilityZones"
    NODES = "nodes"
    MACHINE_TYPE = "machineType"
    STORAGE_GIB = "storageGib"
    SPEND_LIMIT = "spendLimit"
    TEAM_PROJECT = "teamProject"
    DATABASE_TYPE = "databaseType"
    DEDICATED_LOCATION_LABEL = "dedicatedLocationLabel"
    SERVERLESS_LOCATION_LABEL = "serverlessLocationLabel"
    HARDWARE_LABEL = "hardwareLabel"
    PLAN_LABEL = "planLabel"
    SPEND_LIMIT_LABEL = "spendLimitLabel"


class InstancePhase(_StrEnum):
    """Phases of instance provisioning."""

    UNKNOWN = "Unknown"
    PENDING = "Pending"
    CREATING = "Creating"
    UPDATING = "Updating"
    DELETING = "Deleting"
    DELETED = "Deleted"
    READY = "Ready"
    ERROR = "Error"
    FAILED = "Failed"


class PlatformName(_StrEnum):
    """Names of the installable platform components."""

    CRUNCHY_BRIDGE = "crunchy-bridge"
    DBAAS_DYNAMIC_PLUGIN = "dbaas-dynamic-plugin"
    COCKROACHDB = "cockroachdb-cloud"
    OBSERVABILITY = "observability"
    DBAAS_QUICK_STARTS = "dbaas-quick-starts"
    RDS_PROVIDER = "rds-provider"


class PlatformType(IntEnum):
    """Kinds of platform component."""

    QUICK_START = 0
    CONSOLE_PLUGIN = 1
    OPERATOR = 2
    OBSERVABILITY = 3


class PlatformInstlnStatus(_StrEnum):
    """Outcome of a platform installation."""

    SUCCESS = "success"
    FAILED = "failed"
    IN_PROGRESS = "in progress"