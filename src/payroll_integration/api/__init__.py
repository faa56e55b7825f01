"""HTTP API for the integration engine."""
