"""Material registry.

The registry is the arena that owns material records. Cells reference the
records it hands out and never modify them.
"""

import logging
import warnings
from pathlib import Path

import yaml

from cpm_1d.core.exceptions import ConfigurationError
from cpm_1d.core.materials import MGCrossSections

logger = logging.getLogger(__name__)

LIBRARY_PATH = Path(__file__).parent / "library.yaml"


class MaterialRegistry:
    """Central registry for multigroup material definitions.

    Runtime API:
        - get_material(name) -> MGCrossSections
        - list_materials() -> List[str]
        - register_material(material) -> None

    Validation happens in MGCrossSections.__post_init__; the registry only
    guards against duplicate names.
    """

    def __init__(self, config_path: str | None = None):
        """Initialize material registry.

        Args:
            config_path: Path to a materials YAML file to load

        """
        self._materials: dict[str, MGCrossSections] = {}
        self._config_path = config_path

        if config_path:
            self.load_from_yaml(config_path)

    def register_material(self, material: MGCrossSections) -> None:
        """Register a material.

        A material with the same name is replaced, with a warning.
        """
        name = material.name

        if name in self._materials:
            warnings.warn(
                f"Material '{name}' already registered. Overwriting.",
                UserWarning,
                stacklevel=2,
            )

        self._materials[name] = material

    def get_material(self, name: str) -> MGCrossSections:
        """Get a material by name.

        Raises:
            KeyError: If material not found

        """
        if name not in self._materials:
            available = ", ".join(self.list_materials())
            raise KeyError(
                f"Material '{name}' not found. Available: {available}",
            )

        return self._materials[name]

    def list_materials(self) -> list[str]:
        return list(self._materials.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._materials

    def __len__(self) -> int:
        return len(self._materials)

    def load_from_yaml(self, yaml_path: str) -> None:
        """Load materials from a YAML file.

        Expected format:
            materials:
              - name: fuel
                Etr: [0.5, 0.8]
                Es_tr: [[0.1, 0.05], [0.0, 0.4]]
                Ea: [0.01, 0.2]

        Args:
            yaml_path: Path to YAML file

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If the file layout or a material is invalid

        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Material config not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or "materials" not in data:
            raise ConfigurationError(f"{yaml_path}: YAML must contain a 'materials' key")

        for mat_data in data["materials"]:
            self.register_material(MGCrossSections.from_dict(mat_data))

        logger.debug(f"Loaded {len(data['materials'])} materials from {path}")

    def save_to_yaml(self, yaml_path: str) -> None:
        """Save all registered materials to a YAML file."""
        data = {
            "materials": [mat.to_dict() for mat in self._materials.values()],
        }

        path = Path(yaml_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=None, sort_keys=False)


# Global registry instance
_global_registry: MaterialRegistry | None = None


def get_global_registry() -> MaterialRegistry:
    """Get or create the global registry, preloaded with library.yaml."""
    global _global_registry
    if _global_registry is None:
        _global_registry = MaterialRegistry(str(LIBRARY_PATH))

    return _global_registry


def get_material(name: str) -> MGCrossSections:
    """Get material from the global registry.

    Raises:
        KeyError: If material not found

    """
    return get_global_registry().get_material(name)


def list_materials() -> list[str]:
    """List all materials in the global registry."""
    return get_global_registry().list_materials()


def register_material(material: MGCrossSections) -> None:
    """Register material in the global registry."""
    get_global_registry().register_material(material)
