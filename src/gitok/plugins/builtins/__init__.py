"""Plugins shipped with gitok and registered on every keystore."""
