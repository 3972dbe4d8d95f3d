from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "dev"
    API_VERSION: str = "v1.4.0"
    DATABASE_URL: str = "sqlite:///./hearu.db"
    # Empty means transcripts are kept in-process (dev/tests only).
    REDIS_URL: str = ""

    JWT_ISSUER: str = "hear-u"
    JWT_AUDIENCE: str = "hear-u-app"
    JWT_ACCESS_TTL_SECONDS: int = 3600
    JWT_REFRESH_TTL_DAYS: int = 14
    JWT_SECRET: str = "change_me_super_secret"

    # Conversation model (OpenAI-compatible chat completions)
    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "deepseek-r1-distill-llama-70b"
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"

    # Criticality model, kept independent from the conversation model
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai"

    LLM_TIMEOUT_SECONDS: int = 25

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() in ("prod", "production")


settings = Settings()
