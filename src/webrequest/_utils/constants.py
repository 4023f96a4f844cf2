# Environment variables
ENV_TIMEOUT_MS = "WEBREQUEST_TIMEOUT_MS"
ENV_ATTEMPTS = "WEBREQUEST_ATTEMPTS"
ENV_USER_AGENT = "WEBREQUEST_USER_AGENT"
ENV_DISABLE_SSL_VERIFY = "WEBREQUEST_DISABLE_SSL_VERIFY"
ENV_DEBUG = "WEBREQUEST_DEBUG"

# Headers
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_COOKIE = "Cookie"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_XML = "application/xml"
CONTENT_TYPE_GZIP = "application/x-gzip"

# Request policy
DEFAULT_TIMEOUT_MS = 1500
DEFAULT_ATTEMPTS = 3

LOGGER_NAME = "webrequest"
PACKAGE_NAME = "webrequest"
