"""Version 1 of the catalog REST API."""
