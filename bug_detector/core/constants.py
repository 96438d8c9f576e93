"""
Constants
Centralised storage for severities, error codes, user-facing messages and the request timeout.
"""
SEVERITIES = ["info", "low", "medium", "high", "critical"]

# Total time budget for one remote analysis call (seconds)
REQUEST_TIMEOUT_SECONDS = 15.0

ANALYZE_PATH = "/analyze"

# Error codes
EMPTY_RESPONSE = "EMPTY_RESPONSE"
NETWORK_ERROR = "NETWORK_ERROR"
TIMEOUT = "TIMEOUT"
INTERNAL_ERROR = "INTERNAL_ERROR"

# User-facing messages
EMPTY_RESPONSE_MESSAGE = "Empty response received from server"
NETWORK_ERROR_MESSAGE = "Network error occurred while contacting the analysis service."
TIMEOUT_MESSAGE = "Request timed out. Please try again."
INTERNAL_ERROR_MESSAGE = "Unexpected error while analyzing code."

HTTP_ERROR_MESSAGES = {
    400: "Invalid request. Please check your input and try again.",
    401: "Unauthorized. Please check your credentials or API access.",
    403: "Forbidden. Your account does not have access to this resource.",
    404: "Service endpoint not found. Please verify the API base URL.",
    408: "Request timeout. Please try again.",
}
SERVER_ERROR_MESSAGE = "Server error while analyzing code. Please try again later."

# Finding defaults
DEFAULT_TITLE = "Finding"
DEFAULT_RULE = "N/A"
DEFAULT_RECOMMENDATION = "Review the related code and apply best practices to address this finding."

# Number of traceback lines kept in network error diagnostics
STACK_LINES = 3
