"""
Lane Guide Constants

Fixed values shared by the detection pipeline, the annotator and the CLI.
Tunable thresholds live in detection/core/config.py instead.
"""


class VisionConstants:
    """Constants for the OpenCV front end."""

    # Gaussian blur
    BLUR_KERNEL = (5, 5)
    BLUR_SIGMA = 1.5

    # HSV bounds for lane marking colors (OpenCV hue range is 0-180)
    WHITE_LOW = (0, 0, 180)
    WHITE_HIGH = (180, 30, 255)
    YELLOW_LOW = (15, 80, 120)
    YELLOW_HIGH = (35, 255, 255)
    BLACK_LOW = (0, 0, 0)
    BLACK_HIGH = (180, 255, 50)

    COLOR_BOUNDS = {
        "white": (WHITE_LOW, WHITE_HIGH),
        "yellow": (YELLOW_LOW, YELLOW_HIGH),
        "black": (BLACK_LOW, BLACK_HIGH),
    }

    # Adaptive Canny thresholds
    ADAPTIVE_DARK_BASE = 30.0       # Base low threshold for dark frames
    ADAPTIVE_BRIGHT_BASE = 50.0     # Base low threshold for bright frames
    ADAPTIVE_BRIGHTNESS_SPLIT = 127
    ADAPTIVE_LOW_CONTRAST_STD = 30
    ADAPTIVE_HIGH_CONTRAST_STD = 60
    ADAPTIVE_LOW_CONTRAST_GAIN = 0.8
    ADAPTIVE_HIGH_CONTRAST_GAIN = 1.2
    ADAPTIVE_MIN = 20.0
    ADAPTIVE_MAX = 70.0
    ADAPTIVE_HIGH_RATIO = 3.0       # high = low * ratio

    # JPEG compression quality
    JPEG_QUALITY = 85


class VisualizationConstants:
    """Constants for the annotated output frame."""

    SEGMENT_THICKNESS = 2
    GUIDE_THICKNESS = 2
    GUIDE_TOP_RATIO = 0.6            # Guide lines run from the bottom up to 60% of height


class GuidanceConstants:
    """Constants for guidance status classification."""

    CENTERED_THRESHOLD = 0.1
