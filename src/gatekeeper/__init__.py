"""Gatekeeper - permission resolution service with per-user overrides."""

__version__ = "0.1.0"
