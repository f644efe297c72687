from datetime import date, datetime, timedelta, timezone

import pytest
import tzlocal
from pydantic import ValidationError

from goldenhour.config import AppConfig, load_config
from goldenhour.core.daylight import Daylight
from goldenhour.core.windows import Coordinate, compute_windows


def test_defaults():
  cfg = load_config(None)
  assert cfg.tick_seconds == 1.0
  assert cfg.location.timeout_seconds == 10.0
  assert cfg.location.maximum_age_seconds == 300.0
  assert cfg.location.high_accuracy
  assert cfg.location.coordinate() is None
  assert cfg.tzinfo() is not None


def test_load_yaml(tmp_path):
  p = tmp_path / "config.yaml"
  p.write_text(
    "timezone: Europe/Paris\n"
    "log_level: info\n"
    "location:\n"
    "  latitude: 48.8566\n"
    "  longitude: 2.3522\n",
    encoding="utf-8",
  )
  cfg = load_config(str(p))
  assert cfg.location.coordinate() == Coordinate(48.8566, 2.3522)
  assert cfg.log_level == "INFO"
  assert str(cfg.tzinfo()) == "Europe/Paris"


def test_empty_file(tmp_path):
  p = tmp_path / "empty.yaml"
  p.write_text("", encoding="utf-8")
  assert load_config(str(p)) == AppConfig()


def test_latitude_without_longitude():
  with pytest.raises(ValidationError):
    AppConfig(location={"latitude": 10.0})


def test_out_of_range_latitude():
  with pytest.raises(ValidationError):
    AppConfig(location={"latitude": 95.0, "longitude": 0.0})


def test_unknown_timezone():
  with pytest.raises(ValidationError):
    AppConfig(timezone="Mars/Olympus_Mons")


def test_utc_zone():
  assert AppConfig(timezone="UTC").tzinfo().utcoffset(None) == timezone.utc.utcoffset(None)


@pytest.fixture
def paris_system_zone(monkeypatch):
  monkeypatch.setenv("TZ", "Europe/Paris")
  tzlocal.reload_localzone()
  yield
  monkeypatch.undo()
  tzlocal.reload_localzone()


def test_system_zone_keeps_dst_rules(paris_system_zone):
  tz = AppConfig().tzinfo()
  # winter offset, whatever the offset is today
  assert tz.utcoffset(datetime(2026, 12, 21, 12)) == timedelta(hours=1)
  assert tz.utcoffset(datetime(2026, 6, 21, 12)) == timedelta(hours=2)
  w = compute_windows(date(2026, 12, 21), Coordinate(48.8566, 2.3522), Daylight(tz=tz))
  assert w.sunrise.hour == 8
