"""Core modules for batch product content generation."""
