# Entrius 2025
# =============================================================================
# GitHub API
# =============================================================================
BASE_GITHUB_API_URL = "https://api.github.com"
GITHUB_ACCEPT_HEADER = "application/vnd.github.v3+json"
DEFAULT_USER_AGENT = "dependabot-approve"
BASE_URL_ENV_VAR = "GITHUB_BASE_URL"
TOKEN_ENV_VAR = "GITHUB_TOKEN"

# =============================================================================
# Requests
# =============================================================================
DEFAULT_TIMEOUT_SECONDS = 30
GET_RETRY_ATTEMPTS = 5  # POST/PUT are never retried
RETRY_DELAY_SECONDS = 0.3

# =============================================================================
# Pull Requests
# =============================================================================
DEFAULT_BOT_AUTHORS = ("dependabot[bot]", "dependabot-preview[bot]")
APPROVAL_EVENT = "APPROVE"
APPROVAL_BODY = "Approved automatically by dependabot-approve"
DISMISSAL_MESSAGE = "junk"

# =============================================================================
# Operator Prompt
# =============================================================================
MAX_SELECTION_ATTEMPTS = 5
SELECT_ALL_TOKEN = "all"

# =============================================================================
# Debug Dumps
# =============================================================================
DUMP_PRS_ENV_VAR = "DA_WRITE_STATUS_PRS"
DUMP_STATUSES_ENV_VAR = "DA_WRITE_STATUS_JSON"

# =============================================================================
# Exit Codes
# =============================================================================
EXIT_API_ERROR = 1
EXIT_USAGE_ERROR = 67
EXIT_INTERRUPTED = 130
