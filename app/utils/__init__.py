"""Utility functions for the GCP Project Manager API."""

from app.utils.helpers import extract_bearer_token, utc_timestamp

__all__ = ["extract_bearer_token", "utc_timestamp"]
