#!/usr/bin/env python3
"""
🌀 FRCT Quadrant Explorer - Configuration Module
================================================
Copyright (c) 2025 PNGN-Tec LLC

Centralized Configuration System
=================================
Complete configuration for the terminal fractal explorer including:
- Default plane window and navigation factors
- Iteration cap defaults, step and floor
- Fractal recurrence constants
- Worker pool sizing for row rendering
- ANSI escape sequences used by the renderer and terminal session
- Runtime configuration with environment overrides

Configuration Overview
======================
Constants at module level are fixed by the rendering law and never change at
runtime. Tunable values live in dataclasses managed by a thread-safe
ConfigurationManager singleton, which reads FRCT_* environment variables on
startup and notifies registered callbacks when reloaded.

Environment Overrides
=====================
- FRCT_MAX_THREADS: worker threads for the frame scheduler
- FRCT_MAX_ITERATIONS: starting iteration cap
- FRCT_ITERATION_STEP: cap increment/decrement step
- FRCT_SNAPSHOT_DIR: directory for PNG snapshots
- FRCT_LOG_LEVEL: logging level name for the CLI
- FRCT_DEBUG: enable debug mode (true/1/yes)
"""

import threading
import logging
import os
from typing import Tuple, Dict, Any, Optional, Callable
from dataclasses import dataclass, field

# Configure logging
logger = logging.getLogger('FRCT.Config')

# Type alias for RGB colors
RGBColor = Tuple[int, int, int]

# ============================================================================
# PLANE WINDOW
# ============================================================================

# Default window of the complex plane (top, bottom, left, right)
DEFAULT_TOP = -1.0
DEFAULT_BOTTOM = 1.0
DEFAULT_LEFT = -2.0
DEFAULT_RIGHT = 1.0

# Navigation factors applied to half extents around the center
ZOOM_IN_FACTOR = 0.9
ZOOM_OUT_FACTOR = 1.1
PAN_NEAR_FACTOR = 0.9    # edge moving toward the center
PAN_FAR_FACTOR = 1.1     # edge moving away from the center

# ============================================================================
# ITERATION CAP
# ============================================================================

DEFAULT_MAX_ITERATIONS = 100
ITERATION_STEP = 10
MIN_ITERATIONS = 10

# ============================================================================
# FRACTAL CONSTANTS
# ============================================================================

ESCAPE_RADIUS = 2.0
ESCAPE_RADIUS_SQUARED = ESCAPE_RADIUS * ESCAPE_RADIUS

# Fixed Julia constant c = 0.156 + 0.8i
JULIA_REAL = 0.156
JULIA_IMAG = 0.8

# Subpixels per cell along each axis
SUBPIXELS = 2

# ============================================================================
# COLOR LAW
# ============================================================================

INTERIOR_COLOR: RGBColor = (0, 0, 0)
IMMEDIATE_ESCAPE_COLOR: RGBColor = (255, 255, 255)
HUE_SATURATION = 100.0
HUE_LIGHTNESS = 50.0

# ============================================================================
# ANSI CODES
# ============================================================================

class ANSI:
    RESET = "\033[0m"
    CLEAR_SCREEN = "\033[2J"
    CURSOR_HOME = "\033[H"
    HIDE_CURSOR = "\033[?25l"
    SHOW_CURSOR = "\033[?25h"
    DISABLE_BLINK = "\033[?12l"
    ENABLE_BLINK = "\033[?12h"
    ALT_SCREEN_ON = "\033[?1049h"
    ALT_SCREEN_OFF = "\033[?1049l"

    @staticmethod
    def fg(rgb: RGBColor) -> str:
        """Truecolor foreground directive"""
        r, g, b = rgb
        return f"\033[38;2;{r};{g};{b}m"

    @staticmethod
    def bg(rgb: RGBColor) -> str:
        """Truecolor background directive"""
        r, g, b = rgb
        return f"\033[48;2;{r};{g};{b}m"

    @staticmethod
    def move_to(column: int, row: int) -> str:
        """Absolute cursor position from zero-based column/row"""
        return f"\033[{row + 1};{column + 1}H"

    @staticmethod
    def title(text: str) -> str:
        """Set the terminal window title"""
        return f"\033]0;{text}\007"


# ============================================================================
# RENDERING CONFIGURATION
# ============================================================================

@dataclass
class RenderingConfig:
    """Render parameters and their mutation rules"""

    # Iteration cap
    default_max_iterations: int = DEFAULT_MAX_ITERATIONS
    iteration_step: int = ITERATION_STEP
    min_iterations: int = MIN_ITERATIONS

    # Index into the fractal variant list
    default_variant: int = 0

    # Snapshot export: pixel size of one terminal cell in the PNG
    snapshot_cell_pixels: int = 8

    def validate(self) -> bool:
        """Validate rendering configuration"""
        if self.min_iterations <= 0:
            raise ValueError("Minimum iterations must be positive")
        if self.default_max_iterations < self.min_iterations:
            raise ValueError("Default iterations must not be below the minimum")
        if self.iteration_step <= 0:
            raise ValueError("Iteration step must be positive")
        if self.default_variant < 0:
            raise ValueError("Default variant index must not be negative")
        if self.snapshot_cell_pixels < SUBPIXELS or self.snapshot_cell_pixels % SUBPIXELS:
            raise ValueError("Snapshot cell size must be a positive multiple of 2")
        return True


# ============================================================================
# PERFORMANCE CONFIGURATION
# ============================================================================

@dataclass
class PerformanceConfig:
    """Worker pool sizing for the frame scheduler"""

    max_worker_threads: int = field(default_factory=lambda: os.cpu_count() or 1)

    # Frames shorter than this are rendered on the calling thread
    min_rows_for_pool: int = 2

    def validate(self) -> bool:
        """Validate performance configuration"""
        if self.max_worker_threads <= 0:
            raise ValueError("Max worker threads must be positive")
        if self.min_rows_for_pool <= 0:
            raise ValueError("Pool row threshold must be positive")
        return True


# ============================================================================
# MAIN CONFIGURATION CLASS
# ============================================================================

@dataclass
class ExplorerConfig:
    """Complete system configuration"""

    # Sub-configurations
    rendering: RenderingConfig = field(default_factory=RenderingConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)

    # System-wide settings
    debug_mode: bool = False
    log_level: str = "WARNING"
    title: str = "Mandelbrot Set"
    snapshot_dir: str = "."

    def validate(self) -> bool:
        """Validate entire configuration"""
        self.rendering.validate()
        self.performance.validate()
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ValueError(f"Unknown log level: {self.log_level}")
        return True


# ============================================================================
# CONFIGURATION MANAGER (SINGLETON)
# ============================================================================

class ConfigurationManager:
    """
    Singleton configuration manager with runtime reloading.
    Thread-safe management of global configuration with change notifications.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._config = ExplorerConfig()
        self._callbacks = []
        self._config_lock = threading.RLock()
        self._load_environment_overrides(self._config)

        self._initialized = True
        logger.info("Configuration manager initialized")

    @staticmethod
    def _load_environment_overrides(config: ExplorerConfig):
        """Load configuration overrides from environment variables"""

        # Performance settings
        if 'FRCT_MAX_THREADS' in os.environ:
            config.performance.max_worker_threads = int(os.environ['FRCT_MAX_THREADS'])

        # Rendering settings
        if 'FRCT_MAX_ITERATIONS' in os.environ:
            config.rendering.default_max_iterations = int(os.environ['FRCT_MAX_ITERATIONS'])
        if 'FRCT_ITERATION_STEP' in os.environ:
            config.rendering.iteration_step = int(os.environ['FRCT_ITERATION_STEP'])

        # Output and diagnostics
        if 'FRCT_SNAPSHOT_DIR' in os.environ:
            config.snapshot_dir = os.environ['FRCT_SNAPSHOT_DIR']
        if 'FRCT_LOG_LEVEL' in os.environ:
            config.log_level = os.environ['FRCT_LOG_LEVEL'].upper()
        if 'FRCT_DEBUG' in os.environ:
            config.debug_mode = os.environ['FRCT_DEBUG'].lower() in ('true', '1', 'yes')

    @property
    def config(self) -> ExplorerConfig:
        """Get current configuration"""
        with self._config_lock:
            return self._config

    def reload(self, new_config: Optional[ExplorerConfig] = None) -> bool:
        """
        Reload configuration and notify callbacks.

        Args:
            new_config: New configuration to apply (reloads from env if None)

        Returns:
            True if reload successful
        """
        with self._config_lock:
            old_config = self._config

            try:
                if new_config is None:
                    new_config = ExplorerConfig()
                    self._load_environment_overrides(new_config)
                new_config.validate()
            except ValueError as e:
                logger.error(f"Configuration reload failed: {e}")
                return False

            self._config = new_config
            self._notify_callbacks(old_config, new_config)

            logger.info("Configuration reloaded successfully")
            return True

    def register_callback(self, callback: Callable[[ExplorerConfig, ExplorerConfig], None]):
        """
        Register callback for configuration changes.

        Args:
            callback: Function called with (old_config, new_config)
        """
        self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable):
        """Remove a registered callback"""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self, old_config: ExplorerConfig, new_config: ExplorerConfig):
        """Notify all registered callbacks of configuration change"""
        for callback in self._callbacks:
            try:
                callback(old_config, new_config)
            except Exception as e:
                logger.error(f"Callback notification failed: {e}")


# ============================================================================
# PUBLIC API FUNCTIONS
# ============================================================================

_manager = ConfigurationManager()

def get_config() -> ExplorerConfig:
    """Get current system configuration"""
    return _manager.config

def reload_config(new_config: Optional[ExplorerConfig] = None) -> bool:
    """Reload system configuration"""
    return _manager.reload(new_config)

def register_config_callback(callback: Callable[[ExplorerConfig, ExplorerConfig], None]):
    """Register for configuration change notifications"""
    _manager.register_callback(callback)

def unregister_config_callback(callback: Callable):
    """Unregister a configuration change callback"""
    _manager.unregister_callback(callback)

def get_rendering_config() -> RenderingConfig:
    """Get rendering configuration"""
    return _manager.config.rendering

def get_performance_config() -> PerformanceConfig:
    """Get performance configuration"""
    return _manager.config.performance


def describe_config(config: Optional[ExplorerConfig] = None) -> Dict[str, Any]:
    """Flat dictionary view of the configuration, used for debug logging"""
    config = config or get_config()
    return {
        'max_iterations': config.rendering.default_max_iterations,
        'iteration_step': config.rendering.iteration_step,
        'min_iterations': config.rendering.min_iterations,
        'default_variant': config.rendering.default_variant,
        'max_worker_threads': config.performance.max_worker_threads,
        'snapshot_dir': config.snapshot_dir,
        'debug_mode': config.debug_mode,
        'log_level': config.log_level,
    }
