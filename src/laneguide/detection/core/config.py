"""
Configuration management for the lane guidance system.
Loads from YAML and provides type-safe access to settings.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Optional
import yaml
from pathlib import Path

from laneguide.constants import VisionConstants


def get_project_root() -> Path:
    """
    Find the project root directory by locating pyproject.toml.

    Returns:
        Path to project root directory
    """
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent

    # Fallback: src/laneguide/detection/core/config.py -> project root
    return Path(__file__).resolve().parents[4]


# Default config path at project root
DEFAULT_CONFIG_PATH = get_project_root() / "config.yaml"

CLUSTER_SELECTION_POLICIES = ("largest", "first")


@dataclass
class ProcessingConfig:
    """Decision pipeline parameters (scheduling, filtering, clustering, smoothing)."""

    # Scheduling
    processing_scale: float = 0.2         # Detect on a frame downscaled by this factor
    skip_frames: int = 4                  # Process every (skip_frames + 1)th tick
    force_process_interval_s: float = 0.75

    # Segment filter
    max_angle: float = 1.5                # Ceiling on |dx/dy|
    min_length_ratio: float = 0.15        # fraction of frame height
    max_length_ratio: Optional[float] = None
    min_y_ratio: float = 0.6              # midpoint band, fraction of height
    max_y_ratio: float = 0.95
    left_min_x_ratio: float = 0.1         # left midpoints must lie right of this
    right_max_x_ratio: float = 0.9        # right midpoints must lie left of this

    # Clustering
    cluster_distance: float = 20.0        # pixels, original-frame coordinates
    min_cluster_size: int = 2
    cluster_selection: str = "largest"    # 'largest' or 'first'

    # Lane center estimation
    min_lane_width_ratio: float = 0.3
    max_lane_width_ratio: float = 0.8
    single_side_offset_ratio: float = 0.35
    min_points_both: int = 4
    min_points_single: int = 3

    # Confidence
    confidence_normalizer: float = 10.0
    single_side_normalizer: float = 8.0
    single_side_confidence_cap: float = 0.7
    confidence_threshold: float = 0.6

    # Temporal smoothing
    history_size: int = 5

    def __post_init__(self):
        if not 0.0 < self.processing_scale <= 1.0:
            raise ValueError(f"processing_scale must be in (0, 1], got {self.processing_scale}")
        if self.skip_frames < 0:
            raise ValueError(f"skip_frames must be >= 0, got {self.skip_frames}")
        if self.force_process_interval_s < 0:
            raise ValueError("force_process_interval_s must be >= 0")
        if self.history_size < 1:
            raise ValueError(f"history_size must be >= 1, got {self.history_size}")
        if self.cluster_selection not in CLUSTER_SELECTION_POLICIES:
            raise ValueError(
                f"cluster_selection must be one of {CLUSTER_SELECTION_POLICIES}, "
                f"got {self.cluster_selection!r}"
            )
        if self.confidence_normalizer <= 0 or self.single_side_normalizer <= 0:
            raise ValueError("confidence normalizers must be positive")
        if not 0.0 <= self.single_side_confidence_cap <= 1.0:
            raise ValueError("single_side_confidence_cap must be in [0, 1]")
        if not self.min_y_ratio < self.max_y_ratio:
            raise ValueError(
                f"min_y_ratio ({self.min_y_ratio}) must be below max_y_ratio ({self.max_y_ratio})"
            )
        if not self.min_lane_width_ratio < self.max_lane_width_ratio:
            raise ValueError(
                f"min_lane_width_ratio ({self.min_lane_width_ratio}) must be below "
                f"max_lane_width_ratio ({self.max_lane_width_ratio})"
            )


@dataclass
class VisionConfig:
    """OpenCV front-end parameters."""
    canny_low: int = 30
    canny_high: int = 90
    adaptive_canny: bool = False
    use_color_masks: bool = True
    color_masks: tuple = ("white", "yellow", "black")

    hough_rho: float = 1.0
    hough_theta: float = 0.017453  # pi/180
    hough_threshold: int = 25
    hough_min_line_len: float = 30.0
    hough_max_line_gap: float = 20.0

    # ROI trapezoid (fractions of processing width/height)
    roi_top_left_x: float = 0.15
    roi_top_right_x: float = 0.85
    roi_top_y: float = 0.5

    def __post_init__(self):
        unknown = [name for name in self.color_masks if name not in VisionConstants.COLOR_BOUNDS]
        if unknown:
            raise ValueError(f"Unknown color masks: {unknown}")
        if self.canny_low > self.canny_high:
            raise ValueError("canny_low must not exceed canny_high")


@dataclass
class VisualizationConfig:
    """Annotated output settings."""
    annotate: bool = True
    jpeg_quality: int = 85

    # Colors (BGR format for OpenCV)
    color_left_segment: tuple = (255, 0, 0)
    color_right_segment: tuple = (0, 0, 255)
    color_frame_center: tuple = (255, 255, 255)
    color_lane_center: tuple = (0, 255, 0)


@dataclass
class RunnerConfig:
    """Periodic tick runner settings."""
    tick_interval_s: float = 0.1


@dataclass
class BroadcastConfig:
    """ZMQ result broadcaster settings."""
    enabled: bool = False
    bind_url: str = "tcp://*:5570"
    send_frames: bool = False


@dataclass
class Config:
    """
    Master configuration container.

    Aggregates all subsystem configurations.
    """
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    broadcast: BroadcastConfig = field(default_factory=BroadcastConfig)


def _build_section(cls, data: dict | None):
    """Build a section dataclass from a YAML mapping, ignoring unknown keys."""
    if not data:
        return cls()

    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        # YAML has no tuples
        if isinstance(value, list):
            value = tuple(value)
        kwargs[f.name] = value
    return cls(**kwargs)


class ConfigManager:
    """
    Configuration manager with YAML loading.

    Usage:
        # Load from project root config.yaml (default)
        config = ConfigManager.load()

        # Load from specific path
        config = ConfigManager.load('path/to/config.yaml')

        # Use built-in defaults only
        config = ConfigManager.load('default')

        scale = config.processing.processing_scale
    """

    SECTIONS = {
        'processing': ProcessingConfig,
        'vision': VisionConfig,
        'visualization': VisualizationConfig,
        'runner': RunnerConfig,
        'broadcast': BroadcastConfig,
    }

    @staticmethod
    def load(config_path: str | Path | None = None) -> Config:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file.
                        If None, tries to load from project root config.yaml.
                        If "default", uses built-in defaults without loading file.

        Returns:
            Config object with loaded settings
        """
        if config_path == "default":
            return Config()

        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        path = Path(config_path)
        if not path.exists():
            print(f"⚠ Config file {config_path} not found. Using defaults.")
            return Config()

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)

            if data is None:
                return Config()

            sections = {
                name: _build_section(cls, data.get(name))
                for name, cls in ConfigManager.SECTIONS.items()
            }
            return Config(**sections)

        except (yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
            print(f"✗ Error loading config: {e}")
            print("  Using default configuration.")
            return Config()

    @staticmethod
    def save(config: Config, config_path: str | Path) -> bool:
        """
        Save configuration to YAML file.

        Args:
            config: Config object to save
            config_path: Path to save YAML file

        Returns:
            True if successful
        """
        data = {}
        for name in ConfigManager.SECTIONS:
            section = asdict(getattr(config, name))
            data[name] = {
                key: list(value) if isinstance(value, tuple) else value
                for key, value in section.items()
            }

        try:
            with open(config_path, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False, indent=2, sort_keys=False)
            return True
        except OSError as e:
            print(f"✗ Error saving config: {e}")
            return False
