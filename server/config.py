"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Settlement Notifier"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Key-value storage (one row per key)
    database_url: str = "sqlite:///./settlements.db"
    storage_key: str = "city_database"
    preference_key_prefix: str = "bp_cityNotifier"

    # Host tick clock: the poll runs every poll_interval_ticks ticks
    tick_rate: float = 20.0
    poll_interval_ticks: int = 50
    notifier_enabled: bool = True

    # Commands and replies
    command_namespace: str = "zone"
    message_prefix: str = "[CityNotifier]"
    confirmation_sound: str = "random.levelup"

    # Display
    wilderness_text: str = "§7Wilderness"
    title_fade_in_ticks: int = 10
    title_stay_ticks: int = 25
    title_fade_out_ticks: int = 10


settings = Settings()
