"""
Configuration management for Speech Bubbles.
Handles loading and validation of engine, display and demo settings.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


class TimingConfig(BaseModel):
    """Reading pauses and renderer animation durations."""
    reading_wpm: int = Field(default=200, gt=0)
    min_reading_pause_ms: float = Field(default=1500, ge=0)
    max_reading_pause_ms: float = Field(default=8000, ge=0)

    slide_duration_ms: float = Field(default=800, ge=0)
    fade_duration_ms: float = Field(default=800, ge=0)


class SegmentationConfig(BaseModel):
    """Break-point search around a bubble's overflow offset."""
    search_before: int = Field(default=50, ge=0)
    search_after: int = Field(default=20, ge=0)
    min_break_ratio: float = 0.7
    max_break_ratio: float = 1.3


class DisplayConfig(BaseModel):
    """Viewport and bubble metrics used by the default dimension resolver."""
    viewport_width: float = 1280
    viewport_height: float = 800
    is_mobile: bool = False
    is_mobile_landscape: bool = False

    # Inter font at ~9.5px per character
    char_width: float = 9.5
    horizontal_padding: float = 28
    line_height: float = 32
    header_height: float = 30
    vertical_padding: float = 28
    min_bubble_width: float = 220
    screen_margin: float = 32


class DemoCharacter(BaseModel):
    """A character speaking in the demo conversation."""
    name: str
    reply: str


class DemoConfig(BaseModel):
    """Scripted conversation played by main.py."""
    characters: List[DemoCharacter] = Field(default_factory=lambda: [
        DemoCharacter(
            name="Aria",
            reply=("Hi there! I'm so glad you stopped by today. I've been reading about "
                   "tide pools, and honestly they are tiny worlds of their own. Every "
                   "rock hides crabs, anemones and little fish that wait patiently for "
                   "the ocean to come back. Would you like to hear about the strangest "
                   "creature I found? It is a sea slug that steals stinging cells from "
                   "the jellyfish it eats and keeps them for its own defense!"),
        ),
        DemoCharacter(
            name="Rex",
            reply="Sea slugs? Sure. Just don't tell me they can also sing.",
        ),
    ])
    chars_per_tick: int = Field(default=3, gt=0)
    tick_ms: float = Field(default=40, ge=0)


class LoggingConfig(BaseModel):
    """Log handlers and per-component log levels."""
    console_level: str = "WARNING"
    file_name: str = "speech_bubbles.log"
    max_file_mb: int = Field(default=10, gt=0)
    backup_count: int = Field(default=5, ge=0)
    error_max_file_mb: int = Field(default=5, gt=0)
    error_backup_count: int = Field(default=3, ge=0)

    # Logger name -> level, e.g. quieter renderer output
    levels: Dict[str, str] = Field(default_factory=lambda: {
        "speech_bubbles.engine": "INFO",
        "speech_bubbles.renderer": "INFO",
        "asyncio": "WARNING",
    })


class Config(BaseModel):
    """Main application configuration."""
    app_name: str = "Speech Bubbles"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Component configurations
    timing: TimingConfig = Field(default_factory=TimingConfig)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            base[key] = deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}

    if os.getenv('SPEECH_BUBBLES_LOG_LEVEL'):
        overrides['log_level'] = os.getenv('SPEECH_BUBBLES_LOG_LEVEL')

    # Timing
    if os.getenv('SPEECH_BUBBLES_READING_WPM'):
        overrides.setdefault('timing', {})['reading_wpm'] = os.getenv('SPEECH_BUBBLES_READING_WPM')

    # Display
    if os.getenv('SPEECH_BUBBLES_VIEWPORT_WIDTH'):
        overrides.setdefault('display', {})['viewport_width'] = os.getenv('SPEECH_BUBBLES_VIEWPORT_WIDTH')
    if os.getenv('SPEECH_BUBBLES_VIEWPORT_HEIGHT'):
        overrides.setdefault('display', {})['viewport_height'] = os.getenv('SPEECH_BUBBLES_VIEWPORT_HEIGHT')
    if os.getenv('SPEECH_BUBBLES_MOBILE'):
        overrides.setdefault('display', {})['is_mobile'] = os.getenv('SPEECH_BUBBLES_MOBILE')

    return overrides


def load_config(config_file: Optional[str] = None) -> Config:
    """Load configuration from file or environment variables."""

    # Default config file path
    if config_file is None:
        config_file = "configs/config.yaml"

    config_path = Path(config_file)

    # Load from YAML if exists
    config_data: Dict[str, Any] = {}
    if config_path.exists() and config_path.suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

    final_config = deep_merge(config_data, _env_overrides())

    return Config(**final_config)


def save_config(config: Config, config_file: str = "configs/config.yaml"):
    """Save configuration to YAML file."""
    config_path = Path(config_file)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json")

    with open(config_path, 'w') as f:
        yaml.dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)
