from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
	# Completion service (Lab45 skills API, OpenAI-compatible envelope)
	lab45_api_key: str | None = Field(default=None, validation_alias="LAB45_API_KEY")
	lab45_endpoint: str = Field(default="https://api.lab45.ai/v1.1/skills/completion/query", validation_alias="LAB45_ENDPOINT")
	lab45_model: str = Field(default="gpt-4", validation_alias="LAB45_MODEL")
	lab45_emb_type: str = Field(default="openai", validation_alias="LAB45_EMB_TYPE")
	# 0 disables the timeout; the remote call then blocks until it resolves
	completion_timeout_seconds: float = Field(default=0, validation_alias="COMPLETION_TIMEOUT_SECONDS")

	# Generation parameters per use
	analysis_max_tokens: int = Field(default=3000, validation_alias="ANALYSIS_MAX_TOKENS")
	analysis_temperature: float = Field(default=0.7, validation_alias="ANALYSIS_TEMPERATURE")
	recommendations_max_tokens: int = Field(default=2000, validation_alias="RECOMMENDATIONS_MAX_TOKENS")
	recommendations_temperature: float = Field(default=0.8, validation_alias="RECOMMENDATIONS_TEMPERATURE")

	# Storage
	data_dir: Path = Field(default=Path("data"), validation_alias="DATA_DIR")
	questions_file: str = Field(default="questions.json", validation_alias="QUESTIONS_FILE")
	results_file: str = Field(default="results.json", validation_alias="RESULTS_FILE")
	# Optional override for the canned analysis/recommendations
	fallbacks_file: Path | None = Field(default=None, validation_alias="FALLBACKS_FILE")
	# When set, results go to this database instead of the JSON file
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# HTTP
	api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
	allowed_origins: str = Field(default="http://localhost:3000", validation_alias="ALLOWED_ORIGINS")
	app_version: str = Field(default="1.0.0", validation_alias="APP_VERSION")
	host: str = Field(default="0.0.0.0", validation_alias="HOST")
	port: int = Field(default=3001, validation_alias="PORT")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def questions_path(self) -> Path:
		return self.data_dir / self.questions_file

	@property
	def results_path(self) -> Path:
		return self.data_dir / self.results_file

	@property
	def cors_origins(self) -> list[str]:
		return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

	@property
	def completion_configured(self) -> bool:
		return bool(self.lab45_api_key)


settings = Settings()
