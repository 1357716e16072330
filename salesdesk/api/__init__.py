"""HTTP API for the Sales AI and Support AI assistants."""
