"""
Configuration settings for LiteRecord.

Uses Pydantic Settings to load environment variables for the logical database
bound to the application, its connection parameters, and logging. Extra named
connections can be supplied as a JSON object in ``LITERECORD_DATABASES``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from literecord.errors import UnknownDatabaseError

DEFAULT_DATABASE = "default"

DatabaseType = Literal["pgsql", "sqlite"]


class DatabaseSettings(BaseModel):
    """Connection parameters of one logical database."""

    type: DatabaseType = "pgsql"
    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = "postgres"
    name: str = "literecord"
    path: Optional[str] = None

    model_config = {"frozen": True}

    def dsn(self) -> str:
        """Compose a libpq DSN (PostgreSQL only)."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class Settings(BaseSettings):
    # Application
    database: str = Field(DEFAULT_DATABASE, alias="LITERECORD_DATABASE")
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Default connection
    db_type: DatabaseType = Field("pgsql", alias="DB_TYPE")
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("literecord", alias="DB_NAME")
    db_path: Optional[str] = Field(None, alias="DB_PATH")

    # Additional named connections
    databases: Dict[str, DatabaseSettings] = Field(
        default_factory=dict, alias="LITERECORD_DATABASES"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def database_settings(self, name: Optional[str] = None) -> DatabaseSettings:
        """
        Resolve the connection parameters of a logical database.

        Parameters
        ----------
        name : str, optional
            Logical database name. Defaults to the application database.

        Raises
        ------
        UnknownDatabaseError
            If the name is neither ``default`` nor a key of ``databases``.
        """
        name = name or self.database
        if name in self.databases:
            return self.databases[name]
        if name == DEFAULT_DATABASE:
            return DatabaseSettings(
                type=self.db_type,
                host=self.db_host,
                port=self.db_port,
                user=self.db_user,
                password=self.db_password,
                name=self.db_name,
                path=self.db_path,
            )
        known = ", ".join(sorted({DEFAULT_DATABASE, *self.databases}))
        raise UnknownDatabaseError(f"Unknown database '{name}'. Configured: {known}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


def read(section: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Nested mapping view over the settings, by section.

    ``read("config")["application"]["database"]`` is the logical database the
    application is bound to; ``read("databases")`` lists every connection.
    """
    settings = settings or get_settings()
    if section == "config":
        return {
            "application": {
                "database": settings.database,
                "env": settings.app_env,
                "log_level": settings.log_level,
            }
        }
    if section == "databases":
        names = sorted({DEFAULT_DATABASE, *settings.databases})
        return {name: settings.database_settings(name).model_dump() for name in names}
    raise ValueError(f"Unknown configuration section '{section}'. Available: config, databases")


__all__ = ["DatabaseSettings", "Settings", "get_settings", "read", "DEFAULT_DATABASE"]
