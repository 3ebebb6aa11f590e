"""Mention extraction, rebuild, rename, validation and migration."""
