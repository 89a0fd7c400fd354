"""Packaged target-brand product catalogs."""
