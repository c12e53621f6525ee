"""Integrations with concrete UI toolkits."""
