"""
synthfx: client-side pricing and position engine for a synthetic FX platform.
"""

from .config import EngineConfig, load_config

__version__ = "0.1.0"

__all__ = ["EngineConfig", "load_config", "__version__"]
