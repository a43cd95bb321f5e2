import logging
from typing import Any

from flowgraph.schemas import GraphPayload
from flowgraph.utils.json_extract import extract_json

logger = logging.getLogger(__name__)


def load_generated_graph(payload: Any) -> GraphPayload:
    """
    Accept the step generator's response (dict or raw text).

    Anything without both a ``nodes`` and an ``edges`` list yields an
    empty graph, which every layout step treats as valid input.
    """
    data = extract_json(payload)
    if not isinstance(data.get("nodes"), list) or not isinstance(data.get("edges"), list):
        logger.warning("[GENERATED] Response has no usable nodes/edges, using empty graph")
        return GraphPayload()

    return GraphPayload(nodes=data["nodes"], edges=data["edges"])
