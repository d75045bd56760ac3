"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads each field from two sources (in priority order):
#
#   1. **Environment variables** - e.g., GEMINI_API_KEY=AIza...
#   2. **.env file** - key=value lines in the project root .env file
#
# Field `gemini_api_key` maps to env var `GEMINI_API_KEY`.  Defaults apply
# when neither source sets a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """lexrag settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Embedding Providers ===
    # Empty string = "not configured" → provider selection in main.py skips it.
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_embedding_model: str = "text-embedding-004"
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible APIs (TogetherAI, Ollama /v1, ...)
    openai_embedding_model: str = ""
    embedding_timeout: float = 30.0  # seconds per embedding request

    # === Retrieval ===
    chunk_size: int = 1000
    chunk_overlap: int = 200
    rag_top_k: int = 3
    # 1 = one embedding request at a time, in chunk order.
    embed_concurrency: int = 1

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_embedding_providers(self) -> list[str]:
        """Return embedding provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.gemini_api_key:
            providers.append("gemini")
        if self.openai_api_key:
            providers.append("openai")
        return providers
