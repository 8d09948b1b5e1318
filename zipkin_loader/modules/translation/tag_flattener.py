"""Flattening of nested span tags into dotted binary annotation keys."""

import json
from typing import Any, Dict, List, Optional, Tuple

# The v2 format sniffer in the collector mistakes a literal "tags" value for
# a format marker.
RESERVED_VALUE = "tags"
ESCAPED_VALUE = "tags_"


def stringify(value: Any) -> str:
    """Render a tag value the way it appeared in the JSON log."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def escape_value(value: str) -> str:
    return ESCAPED_VALUE if value == RESERVED_VALUE else value


class TagFlattener:
    """
    Flattens object-valued tags into dotted keys.

    ``{"restify.timers": {"bunyan": 0.058}}`` becomes
    ``[("restify.timers.bunyan", "0.058")]``. One level of nesting is
    flattened by default; ``extra_depth`` grants more levels to tags whose
    key matches a prefix, e.g. ``{"moray.rpc": 1}``.
    """

    def __init__(self, extra_depth: Optional[Dict[str, int]] = None):
        self.extra_depth = extra_depth or {}

    def depth_for(self, key: str) -> int:
        for prefix, extra in self.extra_depth.items():
            if key == prefix or key.startswith(prefix + "."):
                return 1 + extra
        return 1

    def _flatten_object(
        self,
        prefix: str,
        obj: Dict[str, Any],
        depth: int,
        pairs: List[Tuple[str, str]],
    ) -> None:
        for key, value in obj.items():
            path = f"{prefix}.{key}"
            if isinstance(value, dict) and depth > 1:
                self._flatten_object(path, value, depth - 1, pairs)
            else:
                pairs.append((path, stringify(value)))

    def flatten(self, tags: Dict[str, Any]) -> List[Tuple[str, str]]:
        """
        Flatten tags into ordered (key, value) string pairs.

        Args:
            tags: Tag mapping from a trace record

        Returns:
            Pairs in tag order, nested keys expanded in place
        """
        pairs: List[Tuple[str, str]] = []
        for key, value in tags.items():
            if isinstance(value, dict):
                self._flatten_object(key, value, self.depth_for(key), pairs)
            else:
                pairs.append((key, stringify(value)))
        return pairs
