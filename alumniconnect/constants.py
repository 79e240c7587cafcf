"""Project-wide constant values."""
from __future__ import annotations

DEFAULT_NAMESPACE = "alumniconnect"

MESSAGE_PREVIEW_LENGTH = 30

CONNECTION_REQUEST_TEXT = "sent you a connection request."
CONNECTION_ACCEPTED_TEXT = "accepted your connection request."

REGISTRATION_REQUIRED_DETAIL = "Name and Email are required."
LOGIN_FAILED_DETAIL = "User not found. Try sarah@example.com or create an account."
SIGN_IN_REQUIRED_DETAIL = "Sign in to continue."

ASSIST_FALLBACK_TEXT = "Excited to join this community and connect with fellow professionals!"

__all__ = [
    "DEFAULT_NAMESPACE",
    "MESSAGE_PREVIEW_LENGTH",
    "CONNECTION_REQUEST_TEXT",
    "CONNECTION_ACCEPTED_TEXT",
    "REGISTRATION_REQUIRED_DETAIL",
    "LOGIN_FAILED_DETAIL",
    "SIGN_IN_REQUIRED_DETAIL",
    "ASSIST_FALLBACK_TEXT",
]
