"""App settings."""

from typing import Any, Dict, Optional
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from constants import DATABASE_CONNECTION_STRING, DATABASE_NAME


class MongoSettings(BaseSettings):
    """MongoDB connection settings, read from ``MONGO_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    # Full connection string, takes precedence over address/port/credentials
    uri: str = DATABASE_CONNECTION_STRING

    address: str = "127.0.0.1"
    port: int = 27017
    database: str = DATABASE_NAME

    # Authentication
    username: Optional[str] = None
    password: Optional[str] = None
    auth_source: Optional[str] = None
    replica_set: Optional[str] = None

    # Verbose operation logging
    debug: bool = False

    # Timeouts in seconds
    connect_timeout: float = Field(default=10.0, gt=0)
    context_timeout: float = Field(default=30.0, gt=0)
    max_conn_idle_time: float = Field(default=300.0, gt=0)

    # Connection pool
    max_pool_size: int = Field(default=100, ge=0)
    min_pool_size: int = Field(default=10, ge=0)

    def build_uri(self) -> str:
        """Build the MongoDB connection URI."""
        if self.uri:
            return self.uri

        uri = "mongodb://"
        if self.username and self.password:
            uri += f"{quote_plus(self.username)}:{quote_plus(self.password)}@"
        uri += f"{self.address}:{self.port}"

        params = []
        if self.replica_set:
            params.append(f"replicaSet={self.replica_set}")
        if self.auth_source:
            params.append(f"authSource={self.auth_source}")

        if params:
            uri += "/?" + "&".join(params)
        else:
            uri += "/"
        return uri

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``AsyncIOMotorClient``."""
        return {
            "connectTimeoutMS": int(self.connect_timeout * 1000),
            "serverSelectionTimeoutMS": int(self.context_timeout * 1000),
            "maxIdleTimeMS": int(self.max_conn_idle_time * 1000),
            "maxPoolSize": self.max_pool_size,
            "minPoolSize": self.min_pool_size,
        }


