"""Shared constants for gitflow-version."""

APP_NAME = "gitflow-version"
LOGGER_NAME = "gitflow_version"

SNAPSHOT_SUFFIX = "-SNAPSHOT"
RC_MARKER = "-RC."

DEFAULT_POM_FILE = "pom.xml"
DEFAULT_PACKAGE_JSON = "package.json"
REVISION_FIELD = "revision"
PACKAGE_VERSION_FIELD = "version"

WORKSPACE_ENVVAR = "GITHUB_WORKSPACE"
WORKSPACE_CONFIG_FILE = ".gitflow-version.cfg"

# Lookback windows for the merge signal probe
DEVELOP_MAX_COUNT = 10
MAIN_MAX_COUNT = 5
SINCE_DAYS = 3

DEVELOP_MERGE_PATTERNS = (
    r"Merge.*release.*into.*develop",
    r"Merge.*release.*back.*develop",
    r"Bump.*version.*after.*release.*v",
    r"Merge.*hotfix.*into.*develop",
    r"Merge.*hotfix.*back.*develop",
)

MAIN_MERGE_PATTERNS = (
    r"Merge.*release.*into.*main",
    r"Merge.*release.*back.*main",
    r"Merge.*R.*back.*main",
    r"Merge.*hotfix.*into.*main",
    r"Merge.*hotfix.*back.*main",
)

REVISION_WRITERS = ("maven", "inplace")
