"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "Triple Tag Clusters"

    # Database
    DB_PATH: str = "document_analysis.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def DATABASE_URL(self) -> str:
        """SQLite database URL for SQLAlchemy."""
        return f"sqlite:///{self.DB_PATH}"


settings = Settings()

# Cluster registry (resolved against the working directory)
TAG_CLUSTERS_FILE = "tag_clusters.json"

# Fallback cluster
MISC_CLUSTER_ID = 20
MISC_CLUSTER_NAME = "Misc"
MISC_CLUSTER_EXEMPLARS = ["uncategorized", "other", "miscellaneous"]

# Migrations
BATCH_SIZE = 1000
TOP_N_CLUSTERS = 3
DOCUMENT_PROGRESS_EVERY = 100
