"""Data models for knowledge records and search results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from health_kb.core.errors import ValidationError
from health_kb.core.utils import generate_record_id
from health_kb.utils import serialization

MetadataValue = Union[str, int, float, bool, datetime, None]

_METADATA_TYPES = (str, int, float, bool, datetime, type(None))


def validate_metadata(metadata: dict[str, Any] | None) -> dict[str, MetadataValue]:
    """Check that metadata is a flat mapping of string keys to scalars.

    Returns a shallow copy so later changes to the caller's dict do not
    leak into a stored record.

    Raises:
        ValidationError: on non-string keys or non-scalar values.
    """
    if metadata is None:
        return {}
    if not isinstance(metadata, dict):
        raise ValidationError(
            f"metadata must be a mapping, got {type(metadata).__name__}"
        )
    clean: dict[str, MetadataValue] = {}
    for key, value in metadata.items():
        if not isinstance(key, str):
            raise ValidationError(f"metadata keys must be strings, got {key!r}")
        if not isinstance(value, _METADATA_TYPES):
            raise ValidationError(
                f"metadata value for {key!r} must be a str, number, bool or "
                f"datetime, got {type(value).__name__}"
            )
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError(f"metadata value for {key!r} must be finite")
        clean[key] = value
    return clean


@dataclass(frozen=True)
class VectorRecord:
    """A stored document with its embedding.

    Attributes:
        id: Unique identifier within a store
        text: Original document content
        vector: Embedding of ``text``, length equal to the store dimension
        metadata: Caller-supplied scalar attributes, returned verbatim
    """

    text: str
    vector: list[float]
    metadata: dict[str, MetadataValue] = field(default_factory=dict)
    id: str = field(default_factory=generate_record_id)

    @property
    def dimension(self) -> int:
        return len(self.vector)

    @property
    def title(self) -> str | None:
        title = self.metadata.get("title")
        return str(title) if title is not None else None

    @property
    def category(self) -> str | None:
        category = self.metadata.get("category")
        return str(category) if category is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize record to a dict. Datetimes are kept as objects."""
        return {
            "id": self.id,
            "text": self.text,
            "vector": list(self.vector),
            "metadata": dict(self.metadata),
        }

    def to_json(self) -> str:
        """Serialize record to a JSON string with tagged datetimes."""
        return serialization.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VectorRecord":
        """Deserialize a record.

        Accepts ``content`` in place of ``text``, which is how records written
        by the browser dashboard name the field.

        Raises:
            KeyError, TypeError, ValueError: if the data is not a valid record.
        """
        text = data["text"] if "text" in data else data["content"]
        if not isinstance(text, str):
            raise TypeError("record text must be a string")
        vector = [float(v) for v in data["vector"]]
        raw_metadata = data.get("metadata") or {}
        if isinstance(raw_metadata, dict):
            raw_metadata = {
                k: serialization.decode_value(v) for k, v in raw_metadata.items()
            }
        metadata = validate_metadata(raw_metadata)
        return cls(
            id=str(data["id"]),
            text=text,
            vector=vector,
            metadata=metadata,
        )

    @classmethod
    def from_json(cls, json_str: str) -> "VectorRecord":
        """Deserialize a record from a JSON string."""
        return cls.from_dict(serialization.loads(json_str))


@dataclass(frozen=True)
class SearchResult:
    """A record paired with its cosine similarity to a query."""

    record: VectorRecord
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "record": self.record.to_dict(),
            "score": self.score,
        }
