"""Web API for the guide exporter."""
