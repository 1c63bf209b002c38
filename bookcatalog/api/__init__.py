"""HTTP adapter for the catalog."""
