from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from container + optionally from files
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.docker"),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="dev", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    APP_NAME: str = Field(default="ledgerdesk", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))
    PORT: int = Field(default=8000, validation_alias=AliasChoices("PORT", "port"))

    # Organization tax home (GST state code of the seller)
    HOME_STATE_CODE: str = Field(default="27", validation_alias=AliasChoices("HOME_STATE_CODE", "home_state_code"))

    # Totals behaviour
    IGST_TAX_NAME_OVERRIDE: bool = Field(
        default=True,
        validation_alias=AliasChoices("IGST_TAX_NAME_OVERRIDE", "igst_tax_name_override"),
    )
    STRICT_LINE_ITEMS: bool = Field(
        default=False,
        validation_alias=AliasChoices("STRICT_LINE_ITEMS", "strict_line_items"),
    )

    # Document REST backend
    BACKEND_BASE_URL: str = Field(
        default="http://localhost:5000",
        validation_alias=AliasChoices("BACKEND_BASE_URL", "backend_base_url"),
    )
    BACKEND_TIMEOUT: float = Field(default=30, validation_alias=AliasChoices("BACKEND_TIMEOUT", "backend_timeout"))


settings = Settings()
