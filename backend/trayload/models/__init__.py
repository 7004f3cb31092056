"""
ORM models. Importing this package registers every table with Base.metadata.
"""

from trayload.models.cable import Cable, CableType
from trayload.models.material import MaterialSupport, MaterialTray
from trayload.models.project import Project, SupportDistanceOverride
from trayload.models.tray import Tray

__all__ = [
    "Cable",
    "CableType",
    "MaterialSupport",
    "MaterialTray",
    "Project",
    "SupportDistanceOverride",
    "Tray",
]
