"""Configuration management for naive_db."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage configuration."""

    data_dir: Path = Field(default=Path("data"), description="Directory holding table files")
    file_extension: str = Field(
        default=".csv", pattern=r"^\.\w+$", description="Extension of table files"
    )
    sync_on_write: bool = Field(
        default=False, description="fsync the table file after every mutation"
    )


class CodecConfig(BaseModel):
    """Fixed-width slot encoding configuration."""

    integer_width: int = Field(default=10, ge=2, le=20, description="Integer field width")
    float_width: int = Field(default=15, ge=4, le=40, description="Float field width")
    float_precision: int = Field(default=4, ge=0, le=10, description="Float decimal places")
    text_width: int = Field(
        default=20, ge=3, le=1024, description="Text field width, quotes included"
    )
    field_delimiter: str = Field(default=",", min_length=1, max_length=1)
    record_delimiter: str = Field(default="\n", min_length=1, max_length=1)
    quote_char: Literal['"', "'"] = Field(default='"', description="Quote written around text")

    @model_validator(mode="after")
    def _check_widths(self) -> CodecConfig:
        if self.float_precision + 2 > self.float_width:
            raise ValueError(
                f"float_width {self.float_width} cannot hold {self.float_precision} decimals"
            )
        if self.field_delimiter == self.record_delimiter:
            raise ValueError("field and record delimiters must differ")
        return self


class ParserConfig(BaseModel):
    """Statement parser configuration."""

    dialect: str = Field(default="mysql", description="sqlglot dialect used to tokenize statements")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="naive_db", description="Service name for tracing")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class Config(BaseSettings):
    """Main configuration for naive_db."""

    model_config = SettingsConfigDict(
        env_prefix="NAIVE_DB_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    codec: CodecConfig = Field(default_factory=CodecConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the data directory exists."""
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)

    def table_path(self, table_name: str) -> Path:
        """Return the backing file path for a table."""
        return self.storage.data_dir / f"{table_name}{self.storage.file_extension}"


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
