"""Remote custom task API."""

from actionsync.api.client import ApiResponse, CustomTaskClient, sanitize_token

__all__ = ["ApiResponse", "CustomTaskClient", "sanitize_token"]
