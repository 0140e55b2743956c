"""Project analysis: framework detection and component inventory."""

from appnav.analyzer.components import inventory_components
from appnav.analyzer.detector import (
    ProjectInfo,
    detect_dev_port,
    detect_framework,
    detect_project_info,
)

__all__ = [
    "ProjectInfo",
    "detect_dev_port",
    "detect_framework",
    "detect_project_info",
    "inventory_components",
]
