"""Base models shared across data models."""
