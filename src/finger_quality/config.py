"""
Finger Quality Configuration
============================

This module handles configuration loading for the capture quality core.

Every threshold, stride, ratio and weight used by the live detector and
the scoring pipeline is a named value here, so tests and deployments can
override them without touching the algorithms.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    FINGER_QUALITY_LOG_LEVEL         -> logging.level
    FINGER_QUALITY_LOG_FORMAT        -> logging.format
    FINGER_QUALITY_COOLDOWN_MS       -> live.detection_cooldown_ms
    FINGER_QUALITY_RESIZE_WIDTH      -> capture.resize_width
    FINGER_QUALITY_CROP_RATIO        -> capture.crop_size_ratio
    FINGER_QUALITY_REQUIRE_POSITION  -> capture.require_position_for_capture

Example:
    from finger_quality.config import settings

    print(settings.live.radius_ratio)
    print(settings.illumination.min)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class LiveDetectionConfig(BaseModel):
    """Live placement detector configuration."""

    center_ratio: float = Field(
        default=0.5,
        gt=0,
        lt=1,
        description="Circle center as a fraction of frame width/height",
    )
    radius_ratio: float = Field(
        default=1.0 / 6.0,
        gt=0,
        le=1,
        description="Circle radius as a fraction of frame width",
    )
    sample_stride: int = Field(default=2, ge=1, description="Grid step in pixels")
    luma_min: int = Field(default=70, ge=0, le=255, description="Exclusive lower luminance bound")
    luma_max: int = Field(default=210, ge=0, le=255, description="Exclusive upper luminance bound")
    position_ratio_threshold: float = Field(
        default=0.55,
        ge=0,
        le=1,
        description="Fraction of in-range samples required for position_ok",
    )
    light_sample_stride: int = Field(
        default=2000,
        ge=1,
        description="Linear stride over the whole luminance plane for the light check",
    )
    light_min: float = Field(default=70, ge=0, description="Exclusive lower mean bound")
    light_max: float = Field(default=220, ge=0, description="Exclusive upper mean bound")
    light_check_enabled: bool = Field(
        default=True,
        description="Compute light_ok (always True when disabled)",
    )
    detection_cooldown_ms: int = Field(
        default=500,
        ge=0,
        description="Minimum milliseconds between completed detections",
    )


class CaptureConfig(BaseModel):
    """Still capture and scoring pipeline configuration."""

    crop_size_ratio: float = Field(
        default=0.55,
        gt=0,
        le=1,
        description="Square crop side as a fraction of still width",
    )
    resize_width: int = Field(
        default=320,
        ge=8,
        description="Target width of the scored copy (thresholds are tuned to it)",
    )
    resize_interpolation: str = Field(
        default="nearest",
        description="Resize interpolation: 'nearest', 'linear' or 'area'",
    )
    settle_delay_ms: int = Field(
        default=300,
        ge=0,
        description="Delay after stopping the stream before taking the picture",
    )
    require_position_for_capture: bool = Field(
        default=True,
        description="Reject capture while the position indicator is red",
    )
    jpeg_quality: int = Field(default=90, ge=1, le=100, description="Preview JPEG quality")
    concurrent_analyzers: bool = Field(
        default=False,
        description="Run the three analyzers on a thread pool",
    )


class FocusConfig(BaseModel):
    """Focus analyzer configuration."""

    acceptable_threshold: float = Field(
        default=12.0,
        ge=0,
        description="Mean Laplacian above which focus is reported as Good",
    )


class IlluminationConfig(BaseModel):
    """Illumination gate and score bands."""

    min: float = Field(default=70, ge=0, description="Exclusive lower gate bound")
    max: float = Field(default=220, ge=0, description="Exclusive upper gate bound")
    good_min: float = Field(default=85, ge=0, description="Inclusive lower bound of the best band")
    good_max: float = Field(default=195, ge=0, description="Inclusive upper bound of the best band")


class SkinConfig(BaseModel):
    """Rule-based skin classifier configuration."""

    radius_ratio: float = Field(default=0.45, gt=0, description="Circle radius / image width")
    sample_stride: int = Field(default=2, ge=1, description="Grid step in pixels")
    red_min: int = Field(default=50, ge=0, le=255)
    green_min: int = Field(default=35, ge=0, le=255)
    blue_min: int = Field(default=20, ge=0, le=255)
    red_green_margin: int = Field(default=8, ge=0, le=255)
    red_blue_margin: int = Field(default=15, ge=0, le=255)


class CoverageConfig(BaseModel):
    """Coverage gate and position override policy."""

    pass_threshold: float = Field(
        default=20,
        ge=0,
        le=100,
        description="Coverage percent required when position was not ok",
    )
    override_floor: float = Field(
        default=40,
        ge=0,
        le=100,
        description="Coverage below this is replaced when position was ok",
    )
    override_value: float = Field(
        default=65,
        ge=0,
        le=100,
        description="Replacement coverage percent",
    )


class ScoringConfig(BaseModel):
    """Weights of the 0-100 overall score."""

    focus_max: float = Field(default=35, ge=0, description="Maximum focus contribution")
    focus_scale: float = Field(default=35, gt=0, description="Focus value mapped to focus_max")
    illum_good: float = Field(default=35, ge=0, description="Illumination part inside the best band")
    illum_fair: float = Field(default=25, ge=0, description="Illumination part inside the gate")
    illum_poor: float = Field(default=10, ge=0, description="Illumination part otherwise")
    coverage_max: float = Field(default=30, ge=0, description="Maximum coverage contribution")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the finger capture quality core.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    live: LiveDetectionConfig = Field(default_factory=LiveDetectionConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    focus: FocusConfig = Field(default_factory=FocusConfig)
    illumination: IlluminationConfig = Field(default_factory=IlluminationConfig)
    skin: SkinConfig = Field(default_factory=SkinConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Live detection
    if env_cooldown := os.environ.get("FINGER_QUALITY_COOLDOWN_MS"):
        config_data.setdefault("live", {})["detection_cooldown_ms"] = int(env_cooldown)

    # Capture
    if env_width := os.environ.get("FINGER_QUALITY_RESIZE_WIDTH"):
        config_data.setdefault("capture", {})["resize_width"] = int(env_width)
    if env_ratio := os.environ.get("FINGER_QUALITY_CROP_RATIO"):
        config_data.setdefault("capture", {})["crop_size_ratio"] = float(env_ratio)
    if env_require := os.environ.get("FINGER_QUALITY_REQUIRE_POSITION"):
        config_data.setdefault("capture", {})["require_position_for_capture"] = _parse_bool(env_require)

    # Logging
    if env_log := os.environ.get("FINGER_QUALITY_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("FINGER_QUALITY_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
