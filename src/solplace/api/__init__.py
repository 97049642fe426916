"""HTTP API for the Solplace registry."""
