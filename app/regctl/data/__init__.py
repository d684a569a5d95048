"""Bundled data files for regctl."""
