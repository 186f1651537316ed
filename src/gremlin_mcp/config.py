"""
Configuration for the Gremlin MCP server.

All settings are loaded from environment variables via pydantic-settings and
resolved once at startup. Schema discovery settings are converted into an
immutable ``SchemaConfig`` that is passed by reference into the generator.

Environment prefixes:
    GREMLIN_         - connection (endpoint, SSL, credentials, idle timeout)
    GREMLIN_SCHEMA_  - schema discovery and cache tuning
    GREMLIN_MCP_     - MCP server transport and logging
"""

from typing import Self

from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.schema import SchemaConfig
from .models.validators import LogLevel, NameList, Port, PositiveInt, Transport

DEFAULT_ENUM_PROPERTY_BLACKLIST = (
    "id,pk,name,description,startDate,endDate,arrival,departure,timestamp,createdAt,updatedAt"
)


def parse_endpoint(endpoint: str, default_traversal_source: str = "g") -> tuple[str, int, str]:
    """
    Parse a Gremlin endpoint of the form ``host:port`` or ``host:port/traversal_source``.

    Raises:
        ValueError: If host or port is missing or the port is not a positive integer.
    """
    host_port, _, traversal_source = endpoint.strip().partition("/")
    parts = host_port.split(":")
    if len(parts) != 2:
        raise ValueError("Invalid endpoint format. Expected host:port or host:port/traversal_source")

    host, port_str = parts
    if not host or not port_str:
        raise ValueError("Invalid endpoint format. Host and port are required")

    try:
        port = int(port_str)
    except ValueError:
        raise ValueError("Port must be a positive integer") from None
    if port <= 0:
        raise ValueError("Port must be a positive integer")

    return host, port, traversal_source or default_traversal_source


class GremlinSettings(BaseSettings):
    """Gremlin server connection settings."""

    model_config = SettingsConfigDict(env_prefix="GREMLIN_", extra="ignore")

    endpoint: str | None = Field(
        default=None, description="host:port[/traversal_source]; overrides host/port/traversal_source"
    )
    host: str = Field(default="localhost", min_length=1)
    port: Port = 8182
    traversal_source: str = Field(default="g", min_length=1)
    use_ssl: bool = False
    username: str | None = None
    password: SecretStr | None = None
    idle_timeout: PositiveInt = Field(default=300, description="Seconds before an unused connection is recycled")
    pool_size: PositiveInt = 8
    connect_retries: PositiveInt = 3

    @model_validator(mode="after")
    def apply_endpoint(self) -> Self:
        """Split ``endpoint`` into host, port, and traversal source."""
        if self.endpoint:
            host, port, traversal_source = parse_endpoint(self.endpoint, self.traversal_source)
            if port > 65535:
                raise ValueError("Port must be below 65536")
            self.host = host
            self.port = port
            self.traversal_source = traversal_source
        return self

    @property
    def url(self) -> str:
        scheme = "wss" if self.use_ssl else "ws"
        return f"{scheme}://{self.host}:{self.port}/gremlin"


class SchemaSettings(BaseSettings):
    """Schema discovery and cache settings."""

    model_config = SettingsConfigDict(env_prefix="GREMLIN_SCHEMA_", extra="ignore")

    include_sample_values: bool = False
    max_enum_values: int = Field(default=10, ge=1, le=100)
    include_counts: bool = True
    enum_discovery_enabled: bool = True
    enum_cardinality_threshold: PositiveInt = 10
    enum_property_blacklist: NameList = Field(
        default_factory=lambda: DEFAULT_ENUM_PROPERTY_BLACKLIST.split(","), min_length=1
    )
    timeout_ms: PositiveInt = 30_000
    batch_size: PositiveInt = 10
    cache_ttl_seconds: float = Field(default=300.0, gt=0)

    def to_schema_config(self) -> SchemaConfig:
        """Freeze these settings into the config consumed by the generator."""
        return SchemaConfig(
            include_sample_values=self.include_sample_values,
            max_enum_values=self.max_enum_values,
            include_counts=self.include_counts,
            # A zero threshold never classifies anything as an enum
            enum_cardinality_threshold=self.enum_cardinality_threshold if self.enum_discovery_enabled else 0,
            enum_property_blacklist=frozenset(self.enum_property_blacklist),
            timeout_ms=self.timeout_ms,
            batch_size=self.batch_size,
        )


class ServerSettings(BaseSettings):
    """MCP server transport and logging settings."""

    model_config = SettingsConfigDict(env_prefix="GREMLIN_MCP_", extra="ignore")

    name: str = "gremlin-mcp"
    transport: Transport = "stdio"
    host: str = "0.0.0.0"
    port: Port = 8000
    log_level: LogLevel = "info"


class Settings(BaseModel):
    """Aggregate application settings."""

    gremlin: GremlinSettings = Field(default_factory=GremlinSettings)
    schema_discovery: SchemaSettings = Field(default_factory=SchemaSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


def load_settings() -> Settings:
    """Read all settings from the current environment."""
    return Settings()


settings = load_settings()
