import json
import re
from typing import Any, Dict


def extract_json(text: Any) -> Dict[str, Any]:
    """
    Extract first valid JSON object from generator output.
    Returns {} if parsing fails.
    """
    if isinstance(text, dict):
        return text
    if not text or not isinstance(text, str):
        return {}

    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else {}
    except ValueError:
        pass

    # Try to extract JSON block
    match = re.search(r"\{.*\}", text, re.DOTALL)
    if not match:
        return {}

    try:
        parsed = json.loads(match.group(0))
        return parsed if isinstance(parsed, dict) else {}
    except ValueError:
        return {}
