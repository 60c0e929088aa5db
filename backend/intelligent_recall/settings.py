from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field

class Settings(BaseSettings):
	# GEMINI_API_KEY wins when both are set
	gemini_api_key: str | None = Field(default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-3-flash-preview", validation_alias="GEMINI_MODEL")
	gemini_timeout_seconds: float = Field(default=30.0, validation_alias="GEMINI_TIMEOUT_SECONDS")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# Row store holding resources captured by the n8n workflow
	supabase_url: str = Field(default="https://your-project.supabase.co", validation_alias="SUPABASE_URL")
	supabase_anon_key: str = Field(default="your-anon-key", validation_alias="SUPABASE_ANON_KEY")
	# "supabase" (REST) or "sql" (DATABASE_URL via SQLAlchemy)
	feed_backend: str = Field(default="supabase", validation_alias="FEED_BACKEND")
	feed_table: str = Field(default="incoming_resources", validation_alias="FEED_TABLE")
	feed_limit: int = Field(default=6, validation_alias="FEED_LIMIT")

	# Database (only read when FEED_BACKEND=sql)
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# Vocabulary sync is simulated; this is how long the push "takes"
	vocab_sync_delay_seconds: float = Field(default=1.5, validation_alias="VOCAB_SYNC_DELAY_SECONDS")

	# Study sessions idle longer than this are dropped by the cleanup watcher
	session_idle_hours: int = Field(default=24, validation_alias="SESSION_IDLE_HOURS")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def supabase_configured(self) -> bool:
		return "your-project" not in self.supabase_url and self.supabase_anon_key != "your-anon-key"

settings = Settings()
