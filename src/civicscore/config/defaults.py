"""Default configuration values."""

from civicscore.config.settings import ScoringSettings, Settings

DEFAULT_CONFIG: Settings = Settings(
    scoring=ScoringSettings(),
    database_url=None,
    top_issues_limit=20,
    log_level="INFO",
)

# Export as dict for YAML serialization
DEFAULT_CONFIG_DICT: dict = DEFAULT_CONFIG.model_dump(mode="json")
