"""Configuration settings for the timeline application."""
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Config:
    """Application configuration settings.

    Centralized configuration to avoid hardcoded values throughout the codebase.
    """
    # File system
    data_file: Path = Path("~/.ttimeline/tasks.json").expanduser()

    # Visual day
    start_hour: int = 5  # Hour at which a visual day begins
    snap_interval_minutes: int = 15

    # Timeline grid (terminal cells)
    rows_per_hour: int = 4
    days_to_show: int = 3
    column_width: int = 24
    max_search_days: int = 365

    # Drag and auto-scroll
    drag_threshold: int = 1  # Cells the pointer must travel before a press becomes a drag
    auto_scroll_band: int = 2  # Rows from the viewport edge
    auto_scroll_max_speed: int = 2  # Rows per tick
    auto_scroll_interval: float = 0.05  # Seconds

    # Colors
    color_primary: str = "#0abdc6"  # Cyan - primary accent
    color_accent: str = "#ff006e"  # Pink - selection highlight
    color_secondary: str = "#8b5cf6"  # Purple - secondary accent
    color_bg_dark: str = "#1a1a2e"  # Dark background
    color_bg_medium: str = "#2d2d44"  # Medium background
    color_text: str = "#e2e8f0"  # Light text

    def __post_init__(self):
        if not 0 <= self.start_hour <= 23:
            raise ValueError(f"start_hour must be between 0 and 23, got {self.start_hour}")
        if self.snap_interval_minutes <= 0:
            raise ValueError(f"snap_interval_minutes must be positive, got {self.snap_interval_minutes}")
        if self.rows_per_hour <= 0:
            raise ValueError(f"rows_per_hour must be positive, got {self.rows_per_hour}")

    @property
    def pixels_per_minute(self) -> float:
        """Grid rows per minute of timeline."""
        return self.rows_per_hour / 60

    @classmethod
    def load(cls) -> 'Config':
        """
        Load configuration.

        Defaults can be overridden with environment variables:
        TTIMELINE_DATA_FILE, TTIMELINE_START_HOUR, TTIMELINE_SNAP_MINUTES,
        TTIMELINE_DAYS.

        Returns:
            Config instance with default or loaded values

        Raises:
            ValueError: If an override is not a valid integer or is out of range
        """
        overrides = {}
        data_file = os.environ.get("TTIMELINE_DATA_FILE")
        if data_file:
            overrides["data_file"] = Path(data_file).expanduser()

        int_settings = {
            "TTIMELINE_START_HOUR": "start_hour",
            "TTIMELINE_SNAP_MINUTES": "snap_interval_minutes",
            "TTIMELINE_DAYS": "days_to_show",
        }
        for env_name, field_name in int_settings.items():
            raw = os.environ.get(env_name)
            if raw is None or raw.strip() == "":
                continue
            try:
                overrides[field_name] = int(raw)
            except ValueError as e:
                raise ValueError(f"{env_name} must be an integer, got {raw!r}") from e

        return cls(**overrides)


# Global config instance
config = Config.load()
