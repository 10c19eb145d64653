"""Resource Hub API."""
