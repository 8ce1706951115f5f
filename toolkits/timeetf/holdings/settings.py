"""Runtime configuration for the holdings build."""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .defaults import (
    DEFAULT_HISTORY_DIR,
    DEFAULT_HISTORY_KEEP_DAYS,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SHARES_THRESHOLD,
    DEFAULT_TIMEZONE,
    DEFAULT_WEIGHT_THRESHOLD,
    FUND_GROUP_A,
    FUND_GROUP_B,
    FUNDS,
)
from .domain import FundName, Mode

logger = logging.getLogger(__name__)


class FundUniverse(BaseModel):
    """Recognised funds, their display groups and per-mode thresholds."""

    funds: list[FundName] = Field(default_factory=lambda: list(FUNDS))
    fund_group_a: list[FundName] = Field(default_factory=lambda: list(FUND_GROUP_A))
    fund_group_b: list[FundName] = Field(default_factory=lambda: list(FUND_GROUP_B))
    weight_threshold: float = Field(default=DEFAULT_WEIGHT_THRESHOLD, ge=0)
    shares_threshold: int = Field(default=DEFAULT_SHARES_THRESHOLD, ge=0)

    @model_validator(mode="after")
    def _check_groups(self) -> "FundUniverse":
        known = set(self.funds)
        unknown = [fund for fund in self.fund_group_a + self.fund_group_b if fund not in known]
        if unknown:
            raise ValueError(f"Fund groups reference unrecognised funds: {', '.join(unknown)}")
        return self

    def threshold_for(self, mode: Mode) -> int | float:
        if mode is Mode.SHARES:
            return self.shares_threshold
        return self.weight_threshold

    def with_thresholds(self, *, weight: float | None = None, shares: int | None = None) -> "FundUniverse":
        """Return a copy with any non-``None`` threshold overrides applied."""
        update: dict[str, Any] = {}
        if weight is not None:
            update["weight_threshold"] = weight
        if shares is not None:
            update["shares_threshold"] = shares
        if not update:
            return self
        return FundUniverse.model_validate({**self.model_dump(), **update})


def load_fund_universe(path: str | Path | None) -> FundUniverse:
    """Read the fund universe from TOML or JSON; defaults fill missing keys."""
    if path is None:
        logger.debug("No fund config given, using built-in fund list")
        return FundUniverse()

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise RuntimeError(f"Fund config not found: {cfg_path}")

    try:
        if cfg_path.suffix.lower() == ".toml":
            with cfg_path.open("rb") as handle:
                data = tomllib.load(handle)
        else:
            with cfg_path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise RuntimeError(f"Failed to parse fund config: {cfg_path}") from exc
    if not isinstance(data, Mapping):
        raise RuntimeError(f"Fund config must be a table/object: {cfg_path}")

    universe = FundUniverse.model_validate(dict(data))
    logger.info("Loaded fund config %s (%d funds)", cfg_path, len(universe.funds))
    return universe


class BuildSettings(BaseSettings):
    """Build settings sourced from ``HOLDINGS_*`` environment variables."""

    history_dir: str = Field(
        default=DEFAULT_HISTORY_DIR,
        validation_alias=AliasChoices("history_dir", "HOLDINGS_HISTORY_DIR"),
    )
    output_dir: str = Field(
        default=DEFAULT_OUTPUT_DIR,
        validation_alias=AliasChoices("output_dir", "HOLDINGS_OUTPUT_DIR"),
    )
    funds_config: str | None = Field(
        default=None,
        validation_alias=AliasChoices("funds_config", "HOLDINGS_FUNDS_CONFIG"),
    )
    history_keep_days: int = Field(
        default=DEFAULT_HISTORY_KEEP_DAYS,
        ge=0,
        validation_alias=AliasChoices("history_keep_days", "HOLDINGS_HISTORY_KEEP_DAYS", "HOLDINGS_KEEP_DAYS"),
    )
    timezone: str = Field(
        default=DEFAULT_TIMEZONE,
        validation_alias=AliasChoices("timezone", "HOLDINGS_TIMEZONE"),
    )
    weight_threshold: float | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("weight_threshold", "HOLDINGS_WEIGHT_THRESHOLD"),
    )
    shares_threshold: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("shares_threshold", "HOLDINGS_SHARES_THRESHOLD"),
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="", extra="ignore")


@lru_cache
def get_settings() -> BuildSettings:
    """Cached accessor so we only load settings once per process."""
    return BuildSettings()
