"""HTTP server for richdoc."""
