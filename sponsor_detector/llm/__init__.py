from sponsor_detector.llm.gemini import DEFAULT_MODEL, CompletionClient, CompletionError, GeminiClient

__all__ = ["DEFAULT_MODEL", "CompletionClient", "CompletionError", "GeminiClient"]
