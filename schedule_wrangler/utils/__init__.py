"""Utility functions for Schedule Wrangler."""
