from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "Cashminder"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Storage: "memory" keeps everything in process, "dynamo" uses DynamoDB tables
    STORAGE_BACKEND: str = Field(default="memory")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_TRANSACTIONS_TABLE: str = Field(default="cashminder-transactions")
    DYNAMO_CATEGORIES_TABLE: str = Field(default="cashminder-categories")
    DYNAMO_BUDGETS_TABLE: str = Field(default="cashminder-budgets")
    DYNAMO_GOALS_TABLE: str = Field(default="cashminder-goals")

    # Analytics
    MONTHLY_TREND_MONTHS: int = Field(default=6, ge=1, le=60)
    DEFAULT_CATEGORY_COLOR: str = "#6366f1"
    DEFAULT_TIME_RANGE: str = "last30days"
    RECENT_TRANSACTIONS_LIMIT: int = 5


settings = Settings()
