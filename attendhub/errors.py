"""
Stable error codes returned as ``{"error": code}`` bodies.
"""

EMAIL_REQUIRED = "email_required"
INVALID_PAYLOAD = "invalid_payload"
USER_NOT_FOUND = "user_not_found"
NOT_FOUND = "not_found"
INVALID_CREDENTIALS = "invalid_credentials"
CONFLICT = "conflict"
SERVER_ERROR = "server_error"
