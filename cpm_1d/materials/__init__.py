"""Multigroup material library.

Module structure:
    registry: MaterialRegistry and global convenience functions
    library.yaml: Seven-group UO2 and H2O cross sections

Example usage:
    >>> from cpm_1d.materials import get_material, list_materials
    >>> list_materials()
    ['UO2', 'H2O']
    >>> get_material("UO2").ngroups
    7
"""

from cpm_1d.core.materials import MGCrossSections
from .registry import (
    LIBRARY_PATH,
    MaterialRegistry,
    get_global_registry,
    get_material,
    list_materials,
    register_material,
)

__all__ = [
    "MGCrossSections",
    "MaterialRegistry",
    "LIBRARY_PATH",
    "get_global_registry",
    "get_material",
    "list_materials",
    "register_material",
]
