from datetime import tzinfo
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from tzlocal import get_localzone

from .core.windows import Coordinate


class LocationConfig(BaseModel):
  latitude: Optional[float] = Field(default=None, ge=-90, le=90)
  longitude: Optional[float] = Field(default=None, ge=-180, le=180)
  high_accuracy: bool = True
  timeout_seconds: float = Field(default=10.0, gt=0)
  maximum_age_seconds: float = Field(default=300.0, ge=0)

  @model_validator(mode="after")
  def _both_or_neither(self):
    if (self.latitude is None) != (self.longitude is None):
      raise ValueError("latitude and longitude must be given together")
    return self

  def coordinate(self) -> Optional[Coordinate]:
    if self.latitude is None:
      return None
    return Coordinate(self.latitude, self.longitude)


class AppConfig(BaseModel):
  timezone: Optional[str] = None
  tick_seconds: float = Field(default=1.0, gt=0)
  log_level: str = "WARNING"
  location: LocationConfig = Field(default_factory=LocationConfig)

  @field_validator("timezone")
  @classmethod
  def _known_zone(cls, v):
    if v is not None:
      try:
        ZoneInfo(v)
      except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unknown timezone: {v}") from e
    return v

  @field_validator("log_level")
  @classmethod
  def _upper_level(cls, v):
    v = v.upper()
    if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
      raise ValueError(f"unknown log level: {v}")
    return v

  def tzinfo(self) -> tzinfo:
    if self.timezone:
      return ZoneInfo(self.timezone)
    # system zone as an IANA zone, so DST rules apply on other dates
    return get_localzone()


def load_config(path: Optional[str] = None) -> AppConfig:
  if not path:
    return AppConfig()
  raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
  return AppConfig(**raw)
