"""Turns raw JSON Schema documents into compiled schema trees."""
