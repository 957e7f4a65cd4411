"""Utility helpers for richdoc."""
