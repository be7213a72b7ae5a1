"""Health Knowledge Store API service."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from health_kb.core.categories import list_categories
from health_kb.core.config import AppSettings
from health_kb.core.errors import ValidationError
from health_kb.core.models import VectorRecord
from health_kb.core.store import KnowledgeStore

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Health Knowledge Store API",
    description="Semantic search over a health knowledge base",
    version="0.1.0",
)

_store: Optional[KnowledgeStore] = None

MetadataField = Union[str, int, float, bool, datetime, None]


def get_store() -> KnowledgeStore:
    """Get or create the shared store instance."""
    global _store
    if _store is None:
        settings = AppSettings()
        _store = KnowledgeStore(config=settings.to_store_config())
    return _store


def set_store(store: Optional[KnowledgeStore]) -> None:
    """Replace the shared store instance (used by tests and embedders)."""
    global _store
    _store = store


class AddDocumentRequest(BaseModel):
    text: str
    metadata: Dict[str, MetadataField] = Field(default_factory=dict)


class AddDocumentResponse(BaseModel):
    id: str


class SearchRequest(BaseModel):
    query: str
    top_k: Optional[int] = None
    category: Optional[str] = None


class RecordResponse(BaseModel):
    id: str
    text: str
    metadata: Dict[str, MetadataField]

    @classmethod
    def from_record(cls, record: VectorRecord) -> "RecordResponse":
        return cls(id=record.id, text=record.text, metadata=dict(record.metadata))


class SearchHitResponse(BaseModel):
    record: RecordResponse
    score: float


class SearchResponse(BaseModel):
    results: List[SearchHitResponse]
    context: str


@app.post("/api/knowledge")
async def add_document(request: AddDocumentRequest) -> AddDocumentResponse:
    """Add a document to the knowledge base."""
    store = get_store()
    try:
        record_id = store.add(request.text, request.metadata)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return AddDocumentResponse(id=record_id)


@app.post("/api/knowledge/search")
async def search_documents(request: SearchRequest) -> SearchResponse:
    """Search the knowledge base by similarity."""
    store = get_store()
    try:
        results = store.search(request.query, request.top_k, category=request.category)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return SearchResponse(
        results=[
            SearchHitResponse(record=RecordResponse.from_record(r.record), score=r.score)
            for r in results
        ],
        context=store.format_context(results),
    )


@app.get("/api/knowledge")
async def list_documents() -> List[RecordResponse]:
    """List all documents in insertion order."""
    store = get_store()
    return [RecordResponse.from_record(r) for r in store.list()]


@app.get("/api/knowledge/categories")
async def get_categories() -> List[Dict[str, str]]:
    """List the knowledge categories."""
    return list_categories()


@app.get("/api/knowledge/stats")
async def get_stats() -> Dict[str, Any]:
    """Get knowledge store statistics."""
    return get_store().stats()


@app.delete("/api/knowledge/{record_id}")
async def delete_document(record_id: str) -> Dict[str, str]:
    """Delete a single document."""
    store = get_store()
    if not store.delete(record_id):
        raise HTTPException(status_code=404, detail=f"Unknown record {record_id}")
    return {"message": "Deleted successfully"}


@app.delete("/api/knowledge")
async def clear_documents() -> Dict[str, str]:
    """Remove every document."""
    get_store().clear()
    return {"message": "Knowledge base cleared successfully"}


@app.get("/health")
async def health_check():
    """Health check."""
    return {"status": "healthy", "service": "health-kb-api"}


def main() -> None:
    import uvicorn

    settings = AppSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8080"))
    logger.info("Starting Health Knowledge Store API on %s:%d", host, port)

    uvicorn.run("health_kb.api:app", host=host, port=port)


if __name__ == "__main__":
    main()
