"""Application DTOs."""
