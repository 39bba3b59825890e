from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Backend can be "ai_studio" (Generative Language API), "vertex" (Vertex AI Express) or "openrouter"
	llm_provider: str = Field(default="ai_studio", validation_alias="LLM_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Unset leaves the model default; 0 disables thinking on 2.5 Flash
	gemini_thinking_budget: int | None = Field(default=None, validation_alias="GEMINI_THINKING_BUDGET")
	llm_timeout_seconds: float = Field(default=60.0, validation_alias="LLM_TIMEOUT_SECONDS")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter configuration (used only when LLM_PROVIDER=openrouter)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="google/gemini-2.5-flash", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="Bullying Monitor", validation_alias="OPENROUTER_TITLE")

	# Admin access: a single shared password, bcrypt hash preferred when both are set
	admin_password: str | None = Field(default=None, validation_alias="ADMIN_PASSWORD")
	admin_password_hash: str | None = Field(default=None, validation_alias="ADMIN_PASSWORD_HASH")
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=120, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
	purge_confirmation_minutes: int = Field(default=5, validation_alias="PURGE_CONFIRMATION_MINUTES")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	default_language: str = Field(default="uz", validation_alias="DEFAULT_LANGUAGE")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
