"""
Configuration for layout and scene building.

Defaults reproduce the editor's original geometry. Callers may override any
value from a plain dict (e.g. the bridge's "config" payload).
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict, fields
import logging

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Geometry constants shared by the layout strategies and hit tester."""

    # Node glyphs
    base_node_radius: float = 25.0

    # Hierarchical
    level_height: float = 120.0
    min_node_spacing: float = 90.0
    top_margin: float = 50.0

    # Radial
    radial_base_radius: float = 80.0
    radial_decay: float = 0.7

    # Organic
    organic_base_distance: float = 100.0
    organic_distance_spread: float = 50.0
    organic_jitter: float = 0.5

    # Force-directed
    force_iterations: int = 100
    force_rest_length: float = 100.0
    force_repulsion: float = 1000.0
    force_spring: float = 0.5
    force_step: float = 0.1
    force_seed: int = 42

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'LayoutConfig':
        """Create config from dictionary, ignoring unknown keys."""
        return cls(**_known_fields(cls, d))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SceneConfig:
    """Styling thresholds for the scene builder."""

    connection_distance: float = 500.0
    connection_min_strength: float = 0.1
    new_node_hours: float = 24.0
    edge_color: str = '#BDBDBD'
    edge_color_dark: str = '#757575'
    dark_mode: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'SceneConfig':
        return cls(**_known_fields(cls, d))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _known_fields(cls, d: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(d) - names)
    if unknown:
        logger.warning(f"[Config] Ignoring unknown {cls.__name__} keys: {unknown}")
    return {k: v for k, v in d.items() if k in names}


def load_config(config: Optional[Dict[str, Any]] = None) -> LayoutConfig:
    """
    Build a LayoutConfig from an optional override dict.

    Args:
        config: Partial settings; missing keys keep their defaults

    Returns:
        LayoutConfig instance
    """
    if not config:
        return LayoutConfig()
    return LayoutConfig.from_dict(config)
