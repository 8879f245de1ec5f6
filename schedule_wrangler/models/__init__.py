"""Data models for Schedule Wrangler."""
