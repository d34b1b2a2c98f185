"""Clients for external identity providers."""
