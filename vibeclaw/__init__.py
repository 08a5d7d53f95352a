"""VibeClaw - skill discovery and installation from the Vibe Index catalog."""

__version__ = "0.1.0"

from vibeclaw.config import Config
from vibeclaw.plugin import VibeClawPlugin

__all__ = ["Config", "VibeClawPlugin", "__version__"]
