"""Layer transform and export engine."""

from .exporter import ExportCoordinator
from .layers import apply_modifications

__all__ = ["ExportCoordinator", "apply_modifications"]
