import pytest

from laneguide.detection.core.config import (
    Config,
    ConfigManager,
    ProcessingConfig,
    VisionConfig,
)


def test_defaults():
    config = ConfigManager.load("default")

    assert config.processing.processing_scale == 0.2
    assert config.processing.skip_frames == 4
    assert config.processing.force_process_interval_s == 0.75
    assert config.processing.history_size == 5
    assert config.processing.confidence_threshold == 0.6
    assert config.vision.color_masks == ("white", "yellow", "black")


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "processing:\n"
        "  processing_scale: 0.5\n"
        "  cluster_selection: first\n"
        "  not_a_field: 3\n"
        "vision:\n"
        "  color_masks: [white]\n"
        "runner:\n"
        "  tick_interval_s: 0.05\n"
    )

    config = ConfigManager.load(path)

    assert config.processing.processing_scale == 0.5
    assert config.processing.cluster_selection == "first"
    assert config.processing.skip_frames == 4
    assert config.vision.color_masks == ("white",)
    assert config.runner.tick_interval_s == 0.05
    assert config.broadcast.enabled is False


def test_missing_file_falls_back_to_defaults(tmp_path, capsys):
    config = ConfigManager.load(tmp_path / "nope.yaml")

    assert config == Config()
    assert "not found" in capsys.readouterr().out


def test_invalid_values_fall_back_to_defaults(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("processing:\n  processing_scale: 2.0\n")

    config = ConfigManager.load(path)

    assert config.processing.processing_scale == 0.2
    assert "Error loading config" in capsys.readouterr().out


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert ConfigManager.load(path) == Config()


def test_save_and_reload(tmp_path):
    config = Config(processing=ProcessingConfig(skip_frames=2, history_size=3))
    path = tmp_path / "saved.yaml"

    assert ConfigManager.save(config, path)
    assert ConfigManager.load(path) == config


def test_bundled_config_matches_defaults():
    assert ConfigManager.load() == Config()


@pytest.mark.parametrize("overrides", [
    {"processing_scale": 0.0},
    {"processing_scale": 1.5},
    {"skip_frames": -1},
    {"history_size": 0},
    {"cluster_selection": "nearest"},
    {"force_process_interval_s": -0.1},
    {"min_y_ratio": 0.95, "max_y_ratio": 0.6},
    {"min_y_ratio": 0.7, "max_y_ratio": 0.7},
    {"min_lane_width_ratio": 0.8, "max_lane_width_ratio": 0.3},
])
def test_processing_validation(overrides):
    with pytest.raises(ValueError):
        ProcessingConfig(**overrides)


def test_vision_validation():
    with pytest.raises(ValueError):
        VisionConfig(color_masks=("purple",))
    with pytest.raises(ValueError):
        VisionConfig(canny_low=100, canny_high=50)
