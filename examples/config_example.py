from health_kb.core import (
    EmbeddingConfig,
    GeminiConfig,
    KnowledgeStore,
    KnowledgeStoreConfig,
    RedisConfig,
    StorageBackendConfig,
)


def example_file_store():
    """File-backed store using only the fallback embedding."""
    config = KnowledgeStoreConfig(
        storage=StorageBackendConfig(backend_type="file", path="./data"),
    )

    store = KnowledgeStore(config=config)

    store.add("Limit added sugar to 25 g a day.", {"title": "Sugar", "category": "nutrition"})
    print(store.search("how much sugar", top_k=1))
    store.close()


def example_gemini_redis_store():
    """Redis-backed store embedding with Gemini, falling back when it fails."""
    config = KnowledgeStoreConfig(
        embedding_timeout=5.0,
        storage=StorageBackendConfig(
            backend_type="redis",
            redis=RedisConfig(url="redis://localhost:6379/0"),
            prefix="my_app:",
        ),
        embedding=EmbeddingConfig(
            provider="gemini",
            gemini=GeminiConfig(api_key="your-api-key"),
        ),
    )

    store = KnowledgeStore(config=config)

    store.add("Regular screenings catch hypertension early.", {"title": "Screening"})
    print(store.search("blood pressure checks", top_k=1))
    store.close()


def example_local_model_store():
    """Store embedding with a local sentence-transformers model."""
    config = KnowledgeStoreConfig(
        storage=StorageBackendConfig(backend_type="file", path="./data"),
        embedding=EmbeddingConfig(
            provider="sentence_transformers", model_name="all-mpnet-base-v2"
        ),
        slot_name="local_model",
    )

    store = KnowledgeStore(config=config)

    store.add("Mindfulness practice can reduce stress.", {"category": "mental"})
    print(store.search("stress relief"))
    store.close()


if __name__ == "__main__":
    example_file_store()
