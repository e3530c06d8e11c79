"""
Lotmap Configuration Module
===========================

Centralized configuration for project paths and pipeline constants.
This module provides consistent references throughout the codebase.
"""

# fmt: off
# autopep8: off

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)

# Root directory of the project
PROJECT_ROOT        = Path(__file__).parent.parent

# Project directories
OUTPUTS_DIR         = PROJECT_ROOT / "outputs"
EXAMPLES_DIR        = PROJECT_ROOT / "examples"
EXPORT_DIR          = OUTPUTS_DIR / "export"

# ============================================================================
# CANVAS FITTING
# ============================================================================
# Whole map is scaled so its width lands on this many canvas pixels
TARGET_PIXEL_WIDTH  = 1000.0

# CAD Y axis grows upward, canvas Y grows downward
DEFAULT_FLIP_Y      = True

# ============================================================================
# STYLE DEFAULTS
# ============================================================================
DEFAULT_ICON_SIZE       : Tuple[int, int] = (20, 20)
DEFAULT_FILL_COLOR      = "#9E9E9E"
DEFAULT_STROKE_COLOR    = "#9E9E9E"
DEFAULT_ASSET_PATH      = "/assets/common.svg"
DEFAULT_OPACITY         = 0.8
ICON_OPACITY            = 0.9
POLYGON_STROKE_WIDTH    = 2.0
OPEN_LINE_STROKE_WIDTH  = 1.5

# Text labels are drawn as a fixed box centred on the anchor point
TEXT_BOX_SIZE       : Tuple[int, int] = (40, 20)
TEXT_BOX_FILL       = "rgba(0, 0, 0, 0.6)"
TEXT_BOX_STROKE     = "#ffffff"

# Environment overrides
ENV_TARGET_PIXEL_WIDTH  = "LOTMAP_TARGET_PIXEL_WIDTH"
ENV_FLIP_Y              = "LOTMAP_FLIP_Y"


@dataclass
class PipelineSettings:
    """
    Holds the tunable pipeline parameters and validates them on construction.

    Errors block construction with a ValueError, warnings are only logged.

    Example:
        >>> settings = PipelineSettings(target_pixel_width=1200)
        >>> settings.flip_y
        True
    """

    target_pixel_width: float       = TARGET_PIXEL_WIDTH
    flip_y: bool                    = DEFAULT_FLIP_Y
    icon_size: Tuple[int, int]      = DEFAULT_ICON_SIZE
    fill_color: str                 = DEFAULT_FILL_COLOR
    stroke_color: str               = DEFAULT_STROKE_COLOR
    asset_path: str                 = DEFAULT_ASSET_PATH

    _errors: List[str]              = field(init=False, repr=False, default_factory=list)
    _warnings: List[str]            = field(init=False, repr=False, default_factory=list)

    def __post_init__(self):
        self._validate()
        self._report()

    @classmethod
    def from_env(cls, **overrides) -> "PipelineSettings":
        """Build settings, letting LOTMAP_* environment variables override the defaults."""
        values = {}
        width = os.getenv(ENV_TARGET_PIXEL_WIDTH)
        if width is not None:
            try:
                values["target_pixel_width"] = float(width)
            except ValueError:
                raise ValueError(f"{ENV_TARGET_PIXEL_WIDTH} must be numeric, got {width!r}")
        flip = os.getenv(ENV_FLIP_Y)
        if flip is not None:
            values["flip_y"] = flip.strip().lower() not in ("0", "false", "no", "off")
        values.update(overrides)
        return cls(**values)

    def _validate(self):
        # --- Canvas ---
        if not isinstance(self.target_pixel_width, (int, float)) or isinstance(self.target_pixel_width, bool):
            self._errors.append("[X] target_pixel_width: Must be numeric.")
        elif self.target_pixel_width <= 0:
            self._errors.append("[X] target_pixel_width: Must be > 0.")
        elif self.target_pixel_width > 20000:
            self._warnings.append(f"[!] target_pixel_width ({self.target_pixel_width}) is very large.")

        # --- Icons ---
        if len(self.icon_size) != 2:
            self._errors.append("[X] icon_size: Must be a (width, height) pair.")
        elif any(v <= 0 for v in self.icon_size):
            self._errors.append("[X] icon_size: Width and height must be > 0.")

        # --- Style ---
        if not self.fill_color: self._errors.append("[X] fill_color: Must not be empty.")
        if not self.stroke_color: self._errors.append("[X] stroke_color: Must not be empty.")
        if not self.asset_path: self._errors.append("[X] asset_path: Must not be empty.")

    def _report(self):
        for w in self._warnings:
            logger.warning(w)
        if self._errors:
            for e in self._errors:
                logger.error(e)
            raise ValueError("Invalid pipeline settings: " + "; ".join(self._errors))

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)
