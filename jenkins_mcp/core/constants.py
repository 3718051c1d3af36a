"""
Application Constants

Centralized constants used throughout the application.
"""

# Application metadata
APP_NAME = "host-mcp-jenkins"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Local MCP server for Jenkins - exposes the Jenkins REST API as MCP tools"

# HTTP status codes
HTTP_CREATED = 201
HTTP_FOUND = 302
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_TOO_MANY_REQUESTS = 429
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502
HTTP_SERVICE_UNAVAILABLE = 503
HTTP_GATEWAY_TIMEOUT = 504

# Default timeouts (seconds)
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 5.0

# Connection pool limits (per client call)
MAX_KEEPALIVE_CONNECTIONS = 10
MAX_CONNECTIONS = 20

# Retry configuration defaults
DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 1.0
DEFAULT_MAX_BACKOFF = 30.0
DEFAULT_BACKOFF_MULTIPLIER = 2.0
RETRYABLE_STATUS_CODES = frozenset({
    HTTP_TOO_MANY_REQUESTS,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_BAD_GATEWAY,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_GATEWAY_TIMEOUT,
})

# Log paging and search limits
MAX_LOG_LINES = 10000
DEFAULT_LOG_LIMIT = 100
MAX_SEARCH_MATCHES = 1000
DEFAULT_SEARCH_MATCHES = 100
MAX_CONTEXT_LINES = 10

# Job listing
MAX_JOBS_PAGE_SIZE = 10
MAX_FOLDER_DEPTH = 5

# Jenkins tree parameters
TREE_JOB_LIST = "jobs[name,fullName,url,color,displayName,description]"
TREE_JOB_SCM = (
    "scm[userRemoteConfigs[url],branches[name]],"
    "actions[remoteUrls,lastBuiltRevision[SHA1,branch[SHA1,name]]]"
)
TREE_BUILD_SCM = "actions[remoteUrls,lastBuiltRevision[SHA1,branch[SHA1,name]],buildsByBranchName]"
TREE_BUILD_CHANGE_SETS = (
    "changeSets[items[commitId,timestamp,msg,comment,author[fullName,absoluteUrl],"
    "affectedPaths,paths[editType,file]],kind]"
)
TREE_SCM_SEARCH_FIELDS = (
    "name,fullName,url,color,_class,"
    "scm[userRemoteConfigs[url],branches[name]],actions[remoteUrls]"
)
TREE_ROOT_STATUS = "quietingDown,url,nodeDescription,numExecutors"
TREE_COMPUTER_STATUS = (
    "busyExecutors,totalExecutors,"
    "computer[displayName,idle,offline,temporarilyOffline,numExecutors]"
)
TREE_QUEUE_STATUS = "items[id,task[name],why,blocked,buildable,stuck]"

# HTTP headers
HEADER_LOCATION = "Location"
HEADER_TEXT_SIZE = "X-Text-Size"
HEADER_MORE_DATA = "X-More-Data"

# Logging and transports
VALID_LOG_LEVELS = ("debug", "info", "warning", "warn", "error", "critical")
VALID_TRANSPORTS = ("stdio", "http")
DEFAULT_TRANSPORT = "stdio"
DEFAULT_HTTP_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 3000

# Environment variables mapped onto configuration keys
ENV_CONFIG_KEYS = {
    "JENKINS_URL": "jenkins.url",
    "JENKINS_USER": "jenkins.user",
    "JENKINS_API_TOKEN": "jenkins.api_token",
    "JENKINS_INSECURE": "jenkins.insecure",
    "JENKINS_TIMEOUT": "jenkins.timeout",
    "JENKINS_MAX_RETRIES": "jenkins.max_retries",
    "JENKINS_RETRY_DELAY": "jenkins.retry_delay",
    "LOG_LEVEL": "logging.level",
    "MCP_TRANSPORT": "mcp_server.transport",
    "MCP_HOST": "mcp_server.host",
    "MCP_PORT": "mcp_server.port",
}

# Tool response statuses
STATUS_COMPLETED = "COMPLETED"
STATUS_FAILED = "FAILED"

# Messages
MESSAGE_DATA_RETRIEVED = "Data retrieved successfully."
MESSAGE_NO_RESULTS = "Search completed, but no results were found."
MESSAGE_BUILD_TRIGGERED = "Build triggered successfully."
MESSAGE_BUILD_UPDATED = "Build updated successfully."
ERROR_AUTH_FAILED = "Check your Jenkins URL, username, and API token."
