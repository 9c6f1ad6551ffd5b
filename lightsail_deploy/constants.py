"""Global constants for lightsail-deploy"""

from enum import Enum

APP_NAME = "lightsail-deploy"

# Logging
LOG_FORMAT = "%(message)s"

# Generated file names
CONFIG_FILE_PATTERN = "deployment-{app_type}.config.yml"
WORKFLOW_FILE_PATTERN = ".github/workflows/deploy-{app_type}.yml"
REUSABLE_WORKFLOW_PATH = "./.github/workflows/deploy-generic-reusable.yml"
PACKAGE_DIR_PATTERN = "example-{app_type}-app/"
TRUST_POLICY_FILE_PATTERN = "trust-policy-{role_name}.json"

# Descriptor layout, in emission order
DESCRIPTOR_SECTIONS = [
    "aws",
    "lightsail",
    "application",
    "dependencies",
    "deployment",
    "github_actions",
    "monitoring",
    "security",
    "backup",
]

SECTION_LABELS = {
    "aws": "AWS account settings",
    "lightsail": "Lightsail instance configuration",
    "application": "Application package and runtime environment",
    "dependencies": "Software installed on the instance",
    "deployment": "Deployment timeouts, retries and steps",
    "github_actions": "GitHub Actions triggers, jobs and OIDC authentication",
    "monitoring": "Post-deployment health checks",
    "security": "File permission policy",
    "backup": "Backups taken before each deployment",
}

# Operational policy
SSH_CONNECTION_TIMEOUT = 120  # seconds
COMMAND_EXECUTION_TIMEOUT = 300  # seconds
DOCKER_COMMAND_EXECUTION_TIMEOUT = 600  # seconds
HEALTH_CHECK_TIMEOUT = 180  # seconds
DEFAULT_RETRY_COUNT = 3
SSH_RETRY_COUNT = 5
HEALTH_CHECK_MAX_ATTEMPTS = 15
HEALTH_CHECK_WAIT_BETWEEN_ATTEMPTS = 20  # seconds
HEALTH_CHECK_INITIAL_WAIT = 60  # seconds
BACKUP_RETENTION_DAYS = 7
ARTIFACT_RETENTION_DAYS = 1

FILE_PERMISSIONS = {
    "web_files": "644",
    "directories": "755",
    "config_files": "600",
}

BASE_FIREWALL_PORTS = ["22", "80", "443"]

# Placeholders written into generated files
DB_USER = "app_user"
DB_PASSWORD_PLACEHOLDER = "CHANGE_ME_secure_password_123"
DB_ROOT_PASSWORD_PLACEHOLDER = "CHANGE_ME_root_password_123"
DB_POSTGRES_PASSWORD_PLACEHOLDER = "CHANGE_ME_postgres_password_123"
RDS_ENDPOINT_PLACEHOLDER = "RDS_ENDPOINT"

# Request defaults
DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_APP_VERSION = "1.0.0"
DEFAULT_BLUEPRINT_ID = "ubuntu_22_04"
DEFAULT_BUNDLE_ID = "micro_3_0"
DEFAULT_DATABASE_NAME = "app_db"
DEFAULT_ROLE_NAME_PATTERN = "GitHubActions-{app_type}-deployment"
RDS_NAME_PATTERN = "{app_type}-{database_kind}-db"

# Allow-lists
BLUEPRINT_IDS = ["ubuntu_22_04", "ubuntu_20_04", "amazon_linux_2023"]

# Ascending by size
BUNDLE_IDS = ["nano_3_0", "micro_3_0", "small_3_0", "medium_3_0", "large_3_0"]
DOCKER_EXCLUDED_BUNDLE_IDS = ["nano_3_0", "micro_3_0"]

TRUE_VALUES = ("true", "yes", "y", "1")
FALSE_VALUES = ("false", "no", "n", "0")

# GitHub OIDC
OIDC_PROVIDER_HOST = "token.actions.githubusercontent.com"
OIDC_AUDIENCE = "sts.amazonaws.com"
OIDC_PROVIDER_ARN_PATTERN = "arn:aws:iam::{account_id}:oidc-provider/token.actions.githubusercontent.com"
ROLE_ARN_PATTERN = "arn:aws:iam::{account_id}:role/{role_name}"
ROLE_ARN_VARIABLE = "AWS_ROLE_ARN"
MANAGED_POLICY_ARNS = [
    "arn:aws:iam::aws:policy/ReadOnlyAccess",
    "arn:aws:iam::aws:policy/AmazonLightsailFullAccess",
]


class ApplicationType(Enum):
    LAMP = "lamp"
    NGINX = "nginx"
    NODEJS = "nodejs"
    PYTHON = "python"
    REACT = "react"
    DOCKER = "docker"


class DatabaseKind(Enum):
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    NONE = "none"


class BucketAccess(Enum):
    READ_ONLY = "read_only"
    READ_WRITE = "read_write"


class BucketSize(Enum):
    SMALL = "small_1_0"
    MEDIUM = "medium_1_0"
    LARGE = "large_1_0"


class TrustScope(Enum):
    ANY_BRANCH = "any_branch"
    MAIN_BRANCH_ONLY = "main_branch_only"


# Environment variables read in automated mode
class EnvVar:
    APP_TYPE = "APP_TYPE"
    APP_NAME = "APP_NAME"
    APP_VERSION = "APP_VERSION"
    INSTANCE_NAME = "INSTANCE_NAME"
    AWS_REGION = "AWS_REGION"
    BLUEPRINT_ID = "BLUEPRINT_ID"
    BUNDLE_ID = "BUNDLE_ID"
    DATABASE_TYPE = "DATABASE_TYPE"
    DB_EXTERNAL = "DB_EXTERNAL"
    DB_RDS_NAME = "DB_RDS_NAME"
    DB_NAME = "DB_NAME"
    ENABLE_BUCKET = "ENABLE_BUCKET"
    BUCKET_NAME = "BUCKET_NAME"
    BUCKET_ACCESS = "BUCKET_ACCESS"
    BUCKET_BUNDLE = "BUCKET_BUNDLE"
    AWS_ROLE_ARN = "AWS_ROLE_ARN"
    ROLE_NAME = "ROLE_NAME"
    TRUST_SCOPE = "TRUST_SCOPE"
    GITHUB_REPO = "GITHUB_REPO"
    EXPECTED_CONTENT = "EXPECTED_CONTENT"


REQUEST_ENV_VARS = [
    value for key, value in vars(EnvVar).items() if not key.startswith("_")
]

# Presence of all of these switches to automated mode
AUTOMATION_TRIGGER_VARS = [EnvVar.APP_TYPE, EnvVar.APP_NAME, EnvVar.INSTANCE_NAME]


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "LD001"
    MISSING_REQUIRED_PARAMETER = "LD002"
    INVALID_CHOICE = "LD003"
    INSUFFICIENT_RESOURCES = "LD004"
    INTERNAL_INCONSISTENCY = "LD005"
    SERIALIZATION_FAILED = "LD006"
    DESCRIPTOR_INVALID = "LD007"
    FILE_ALREADY_EXISTS = "LD008"
    COLLABORATOR_FAILED = "LD009"
    VALIDATION_FAILED = "LD010"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_INFO = "ℹ"
EMOJI_ARROW = "→"
EMOJI_ROCKET = "🚀"

# Messages templates
MSG_CONFIG_WRITTEN = f"{EMOJI_SUCCESS} Created {{path}}"
MSG_ROLE_VARIABLE_SET = f"{EMOJI_SUCCESS} {ROLE_ARN_VARIABLE} variable set"
MSG_APP_WRITTEN = f"{EMOJI_SUCCESS} Created sample application {{path}} ({{count}} files)"
