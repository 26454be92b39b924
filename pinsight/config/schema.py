"""Pydantic models for pinsight.yaml validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from pinsight.config.defaults import (
    DATABASE_PATH,
    EXPORT_DIR,
    IMPORT_COLUMNS,
    UNKNOWN_ASSET_CLASS,
)


class DatabaseConfig(BaseModel):
    path: str = DATABASE_PATH


class ExportConfig(BaseModel):
    dir: str = EXPORT_DIR


class AggregationConfig(BaseModel):
    include_cash: bool = True
    unknown_asset_class: str = UNKNOWN_ASSET_CLASS

    @field_validator("unknown_asset_class")
    @classmethod
    def bucket_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("unknown_asset_class must not be blank")
        return v


class ImportColumnsConfig(BaseModel):
    """Header aliases tried, in order, when reading a holdings CSV."""

    symbol: list[str] = Field(default_factory=lambda: list(IMPORT_COLUMNS["symbol"]))
    value: list[str] = Field(default_factory=lambda: list(IMPORT_COLUMNS["value"]))
    currency: list[str] = Field(default_factory=lambda: list(IMPORT_COLUMNS["currency"]))

    @field_validator("symbol", "value")
    @classmethod
    def aliases_required(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("at least one column alias is required")
        return v


class ImportConfig(BaseModel):
    include_cash: bool = True
    columns: ImportColumnsConfig = Field(default_factory=ImportColumnsConfig)


class PinsightConfig(BaseModel):
    """Root configuration model for pinsight."""

    version: int = 1
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    import_: ImportConfig = Field(default_factory=ImportConfig, alias="import")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def coerce_none_to_defaults(cls, data: Any) -> Any:
        """YAML parses empty keys as None. Drop them so defaults apply."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data
