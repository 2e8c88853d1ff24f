"""Provider implementations."""

from lesson_studio.ai.providers.gemini import GeminiClient, client_for

__all__ = ["GeminiClient", "client_for"]
