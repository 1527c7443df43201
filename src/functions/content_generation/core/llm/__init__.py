"""LLM-backed content generation."""

from .openai_generator import ContentGenerationError, OpenAIContentGenerator

__all__ = ["ContentGenerationError", "OpenAIContentGenerator"]
