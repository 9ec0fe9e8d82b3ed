"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Supabase
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str

    # Sessions
    SESSION_SECRET: str
    SESSION_COOKIE_NAME: str = "halal_session"
    SESSION_TTL_HOURS: int = 24
    COOKIE_SECURE: bool = False

    # LLM (empty keys switch generation to the local fallback)
    GROQ_API_KEY: str = ""
    GOOGLE_AI_API_KEY: str = ""
    DEFAULT_MODEL: str = "llama-3.1-8b-instant"
    FALLBACK_MODEL: str = "gemini-1.5-flash"
    GENERATION_TIMEOUT_SECONDS: float = 30.0
    MAX_OUTPUT_TOKENS: int = 1024

    # Credits
    SIGNUP_CREDITS: int = 20
    REFERRAL_SIGNUP_BONUS: int = 1
    CHAT_COST: int = 1

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Rate limiting
    RATE_LIMIT_STANDARD: int = 60
    RATE_LIMIT_AI: int = 10

    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
