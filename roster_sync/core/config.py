# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration: all env-driven, zero hardcode.
Single source of truth for every tunable parameter.

An optional ROSTER_CONFIG_FILE in the legacy plugin format overrides the
roster list and the update interval.
"""

import json
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from roster_sync.core.errors import ConfigurationError


class RosterSetup(BaseModel):
    """One remote roster mapped onto a local permission group."""

    model_config = ConfigDict(populate_by_name=True)

    steam: str = Field(default="OxideMod", alias="Steam", min_length=1)
    local_group: str = Field(default="default", alias="Oxide", min_length=1)


class RosterConfigFile(BaseModel):
    """JSON document layout: {"Group Setup": [...], "Update Interval (Seconds)": 300}."""

    model_config = ConfigDict(populate_by_name=True)

    group_setup: list[RosterSetup] = Field(default_factory=list, alias="Group Setup")
    update_interval: int = Field(default=300, ge=1, alias="Update Interval (Seconds)")


def parse_roster_groups(raw: str) -> list[RosterSetup]:
    """Parse "steam:local,steam:local" pairs; a bare entry maps to "default"."""
    rosters: list[RosterSetup] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" in pair:
            steam, local = pair.split(":", 1)
        else:
            steam, local = pair, "default"
        rosters.append(RosterSetup(steam=steam.strip(), local_group=local.strip() or "default"))
    return rosters


def load_roster_config(path: str) -> RosterConfigFile:
    """Read and validate a roster configuration file."""
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        return RosterConfigFile.model_validate(data)
    except (OSError, ValueError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid roster config file '{path}': {exc}") from exc


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "roster-sync")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "0.3.8")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8005"))

    STEAM_COMMUNITY_URL: str = os.getenv(
        "STEAM_COMMUNITY_URL", "https://steamcommunity.com"
    ).rstrip("/")
    ROSTER_GROUPS: str = os.getenv("ROSTER_GROUPS", "CitizenSO:default,OxideMod:default")
    ROSTER_CONFIG_FILE: Optional[str] = os.getenv("ROSTER_CONFIG_FILE") or None

    UPDATE_INTERVAL: int = int(os.getenv("UPDATE_INTERVAL", "300"))
    DRAIN_INTERVAL: float = float(os.getenv("DRAIN_INTERVAL", "1.0"))
    FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "10.0"))
    BACKOFF_SECONDS: float = float(os.getenv("BACKOFF_SECONDS", "600"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def rosters(self) -> list[RosterSetup]:
        """Configured rosters, in registration order."""
        if self.ROSTER_CONFIG_FILE:
            return load_roster_config(self.ROSTER_CONFIG_FILE).group_setup
        return parse_roster_groups(self.ROSTER_GROUPS)

    def update_interval(self) -> int:
        if self.ROSTER_CONFIG_FILE:
            return load_roster_config(self.ROSTER_CONFIG_FILE).update_interval
        return self.UPDATE_INTERVAL


settings = Settings()
