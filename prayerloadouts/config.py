from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Plugin settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PRAYERLOADOUTS_")

    app_name: str = "Prayer Loadouts"
    debug: bool = False

    # Backing database for the SQL config store (headless runs)
    database_url: str = "sqlite:///prayerloadouts.db"

    # Upper bound on a blocking load issued from the panel
    load_timeout_seconds: float = Field(default=2.0, gt=0)

    # Re-apply the last used loadout after login
    auto_load_on_login: bool = True
    auto_load_delay_seconds: float = Field(default=2.0, ge=0)

    # Filter varbits settle a moment after a reset
    reset_refresh_delay_seconds: float = Field(default=0.15, ge=0)


settings = Settings()


# =============================================================================
# STORAGE LAYOUT
# =============================================================================

# Config group owned by this plugin
CONFIG_GROUP = "prayerloadouts"

# Config group owned by the host's prayer plugin (live order / hidden prayers)
PRAYER_CONFIG_GROUP = "prayer"
PRAYER_ORDER_KEY_PREFIX = "prayer_order_book_"
PRAYER_HIDDEN_KEY_PREFIX = "prayer_hidden_book_"

LAST_LOADOUT_KEY = "last_loadout"

# Stored order value meaning "use the built-in order"
DEFAULT_ORDER = "DEFAULT"
