"""Plugins shipped with todoctl."""
