"""Viewer-scoped notifications: creation, visibility and acknowledgment."""
