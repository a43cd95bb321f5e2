import logging
import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

LOG_LEVEL = os.getenv("FLOWGRAPH_LOG_LEVEL", "INFO")
PRIMARY_LAYOUT_ENABLED = os.getenv("FLOWGRAPH_PRIMARY_LAYOUT", "on").lower() not in ("off", "0", "false", "no")


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@dataclass(frozen=True)
class LayoutConfig:
    """
    Every spacing/distance constant the layout engine uses.

    The defaults match the flow editor canvas. Callers working on a
    different canvas scale pass their own instance (or use
    ``with_overrides``) instead of editing the algorithms.
    """

    # Radial search
    min_distance: float = 120
    radial_fallback_offset: Tuple[float, float] = (200, 200)

    # Grid search
    grid_x: float = 240
    grid_y: float = 140
    grid_size: int = 5                      # odd, cells per side
    grid_fallback_cells: int = 3

    # Ring expansion after the bounded probes; None derives a cap from node count
    max_search_rings: Optional[int] = None

    # Fallback layout (BFS leveling)
    fallback_x_spacing: float = 400
    fallback_y_spacing: float = 200

    # Normalizer grid for nodes without a position
    default_spacing_x: float = 220
    default_spacing_y: float = 120
    default_columns: int = 4

    # Primary layout hints
    node_width: float = 240
    node_height: float = 120
    direction: str = "RIGHT"                # RIGHT | DOWN
    node_spacing: float = 40
    layer_spacing: float = 60

    # Append anchor for nodes added without a drop point
    append_gap: float = 40
    canvas_center: Tuple[float, float] = (200, 200)

    decision_options: Tuple[str, ...] = ("Ja", "Nein")

    def with_overrides(self, **changes) -> "LayoutConfig":
        return replace(self, **changes)


FLOW_EDITOR_CONFIG = LayoutConfig()
PROCESS_MAP_CONFIG = LayoutConfig(node_width=350, node_height=150)
