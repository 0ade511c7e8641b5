"""Configuration for the Entrez E-utilities client."""

# Entrez E-utilities base URL (no trailing slash, endpoint paths carry it)
DEFAULT_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"

# Endpoint paths
EFETCH_PATH = "/efetch.fcgi"
EINFO_PATH = "/einfo.fcgi"
ESEARCH_PATH = "/esearch.fcgi"
ESUMMARY_PATH = "/esummary.fcgi"

# Default parameters sent with every request
DEFAULT_TOOL = "entrez-client"
EMAIL_ENV_VAR = "ENTREZ_EMAIL"
TOOL_ENV_VAR = "ENTREZ_TOOL"

# Rate limiting: NCBI allows at most 3 requests in any rolling second
MAX_REQUESTS_PER_WINDOW = 3
RATE_LIMIT_WINDOW = 1.0  # seconds

# Search term operators
OPERATORS = ("AND", "OR")
DEFAULT_OPERATOR = "AND"

# Request timeout
REQUEST_TIMEOUT = 30  # seconds

# User agent (NCBI requests descriptive user agents)
USER_AGENT = "entrez-client/0.1.0 (Python requests)"
