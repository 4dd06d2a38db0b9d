"""Pydantic models for sysreport configuration."""

from pathlib import Path
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


class AppConfig(BaseModel):
    """Configuration for the report service."""

    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)
    debug: bool = False

    disk_path: Path = Path("/")
    proc_root: Path = Path("/proc")
    deploy_root: Path = Field(default_factory=Path.cwd)
    document_root: Optional[Path] = None

    trust_forwarded_for: bool = True
    timezone: Optional[str] = None

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {value!r}") from e
        return value
