from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Public Qur'an JSON API (equran.id v2 layout: /surat and /surat/{nomor})
	quran_api_base_url: str = Field(default="https://equran.id/api/v2", validation_alias="QURAN_API_BASE_URL")
	# A hung request would otherwise leave the reading panel in "loading" forever
	quran_api_timeout_seconds: float = Field(default=15.0, validation_alias="QURAN_API_TIMEOUT_SECONDS")
	# Prefix each verse with its number ("1. ...") in the reading text
	quran_number_verses: bool = Field(default=True, validation_alias="QURAN_NUMBER_VERSES")

	# Locale for the date stamped on assessment records ("id" or "en")
	screening_locale: str = Field(default="id", validation_alias="SCREENING_LOCALE")

	# Session tokens (login only gates the dashboard; no identity provider)
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=480, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
