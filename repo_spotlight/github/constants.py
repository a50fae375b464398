"""Constants for the GitHub repository provider."""

# GitHub API
GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_USER_REPOS_PATH = "/users/{subject}/repos"
GITHUB_AUTHENTICATED_REPOS_PATH = "/user/repos"
GITHUB_TRAFFIC_VIEWS_PATH = "/repos/{owner}/{name}/traffic/views"
GITHUB_MAX_PER_PAGE = 100

DEFAULT_USER_AGENT = "repo-spotlight/0.1.0"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Guard against a Link header that never stops paginating
MAX_PAGES = 1000

# HTTP status codes
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_TOO_MANY_REQUESTS = 429

# Headers
HEADER_RETRY_AFTER = "retry-after"
HEADER_RATELIMIT_REMAINING = "x-ratelimit-remaining"

AUTH_ERROR_HINT = (
    "Check that GH_SPOTLIGHT_TOKEN or GITHUB_TOKEN is set with a token that "
    "has push access to the repositories (traffic data requires it)."
)
