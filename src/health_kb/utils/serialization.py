"""JSON serialization for record metadata.

Metadata values form a closed set of scalars. Datetimes are written as a
tagged object ``{"$timestamp": "<iso-8601>"}`` so they decode back to
``datetime`` instead of degrading to plain strings. Tags are only decoded
where a metadata value is expected (see :func:`decode_value`), so a
metadata mapping that happens to use ``$timestamp`` as a key is left alone.
"""

import json
from datetime import datetime
from typing import Any

from typing_extensions import override

TIMESTAMP_TAG = "$timestamp"


class MetadataEncoder(json.JSONEncoder):
    """JSON encoder that tags datetime objects."""

    @override
    def default(self, o: Any) -> Any:
        if isinstance(o, datetime):
            return {TIMESTAMP_TAG: o.isoformat()}
        return super().default(o)


def decode_value(value: Any) -> Any:
    """Turn a tagged metadata value back into its Python object.

    Raises:
        ValueError: if a timestamp tag does not hold an ISO-8601 string.
    """
    if isinstance(value, dict) and len(value) == 1 and TIMESTAMP_TAG in value:
        raw = value[TIMESTAMP_TAG]
        if not isinstance(raw, str):
            raise ValueError(f"timestamp tag must hold a string, got {raw!r}")
        return datetime.fromisoformat(raw)
    return value


def dumps(data: Any) -> str:
    """Serialize ``data`` to JSON, tagging datetimes."""
    return json.dumps(data, cls=MetadataEncoder)


def loads(text: str) -> Any:
    """Deserialize JSON produced by :func:`dumps`. Tags are left in place."""
    return json.loads(text)
