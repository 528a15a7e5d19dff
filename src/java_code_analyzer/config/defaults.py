"""Default configurations for Java Code Analyzer."""

# Upstream chat-completion API
DEFAULT_API_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_MODEL = "deepseek-coder"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.1

# Retry policy
DEFAULT_MAX_RETRIES = 3
BASE_TIMEOUT_SECONDS = 30.0
TIMEOUT_INCREMENT_SECONDS = 10.0
MAX_TIMEOUT_SECONDS = 60.0
BACKOFF_BASE_SECONDS = 1.0
RATE_LIMIT_MULTIPLIER = 2.0

# Input limits
MAX_CODE_LENGTH = 10_000
RAW_EXCERPT_LENGTH = 500

# HTTP server
DEFAULT_HOST = "0.0.0.0"  # nosec B104 - container deployment
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"

# Severity levels, most severe first
SEVERITY_LEVELS = ("critical", "high", "medium", "low")

# Synonyms models commonly use instead of the four canonical levels
SEVERITY_ALIASES: dict[str, str] = {
    "blocker": "critical",
    "fatal": "critical",
    "error": "high",
    "major": "high",
    "warning": "medium",
    "moderate": "medium",
    "minor": "low",
    "info": "low",
    "trivial": "low",
}

# Penalty weights per issue for locally estimated scores
MAINTAINABILITY_WEIGHTS = {"critical": 15, "high": 10, "medium": 5, "low": 2}
SECURITY_WEIGHTS = {"critical": 25, "high": 15, "medium": 5, "low": 1}

# Complexity above this value lowers the maintainability estimate
COMPLEXITY_PENALTY_THRESHOLD = 10
MIN_COMPLEXITY = 1
MAX_COMPLEXITY = 50

DEFAULT_SUGGESTIONS = [
    "Review the code logic against the reported findings",
    "Reduce algorithmic complexity where possible",
]

# Values shipped in .env templates that must not count as a real key
PLACEHOLDER_API_KEYS = {
    "your_api_key_here",
    "your-api-key",
    "changeme",
    "sk-xxx",
    "sk-xxxxxxxxxxxxxxxx",
}

ENV_FILES = (".env", ".env.local")
