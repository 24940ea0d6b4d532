import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

BACKEND_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    # LLM Providers
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    ollama_model: Optional[str] = None

    # Note generation LLM settings
    llm_provider: str = "openai"  # openai, anthropic, ollama, test
    llm_model: str = "gpt-4o-mini"

    # Note templates (YAML)
    templates_dir: Path = BACKEND_DIR / "templates"

    # App settings
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("llm_model")
    @classmethod
    def llm_model_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("LLM_MODEL is required and cannot be empty")
        return v

    def get_llm_model(self) -> str:
        """
        Get the LLM model string for pydantic-ai.

        Returns model in format "provider:model", or "test" for the
        offline test model
        """
        if self.llm_provider == "openai":
            return f"openai:{self.llm_model}"
        elif self.llm_provider == "anthropic":
            return f"anthropic:{self.llm_model}"
        elif self.llm_provider == "ollama":
            model = self.ollama_model or self.llm_model
            return f"ollama:{model}"
        elif self.llm_provider == "test":
            return "test"
        else:
            return self.llm_model

    def get_provider_api_key(self) -> Optional[str]:
        """API key for the configured provider, None when it needs none or is unset."""
        if self.llm_provider == "openai":
            return self.openai_api_key
        elif self.llm_provider == "anthropic":
            return self.anthropic_api_key
        return None

    def export_provider_api_key(self) -> bool:
        """
        Expose the provider key to pydantic-ai, which reads it from the
        process environment. A key already set there wins.

        Returns False when no key is configured
        """
        key = self.get_provider_api_key()
        if not key:
            return False
        os.environ.setdefault(f"{self.llm_provider.upper()}_API_KEY", key)
        return True

    @property
    def requires_api_key(self) -> bool:
        return self.llm_provider in ("openai", "anthropic")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Singleton for convenient import
settings = get_settings()
