"""Core domain: models, ports and pipeline services."""
