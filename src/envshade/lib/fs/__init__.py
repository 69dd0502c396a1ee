"""Filesystem collaborators: discovery and backups."""
