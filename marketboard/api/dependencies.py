"""FastAPI dependencies for dependency injection."""

from marketboard.config import Config
from marketboard.datasources import DataSource

# Global instances - initialized at app startup
_datasource: DataSource | None = None
_config: Config | None = None


def set_datasource(datasource: DataSource | None) -> None:
    """Set the global datasource instance."""
    global _datasource
    _datasource = datasource


def get_datasource() -> DataSource:
    """Get the global datasource instance for dependency injection."""
    if _datasource is None:
        raise RuntimeError("DataSource not initialized. Call set_datasource() first.")
    return _datasource


def set_config(config: Config | None) -> None:
    """Set the global configuration."""
    global _config
    _config = config


def get_config() -> Config:
    """Get the global configuration, falling back to the environment."""
    if _config is None:
        return Config.from_env()
    return _config
