"""Batch generation of localized product content."""
