"""Exception and warning types raised by the knowledge store."""


class KnowledgeStoreError(Exception):
    """Base class for knowledge store errors."""


class ValidationError(KnowledgeStoreError, ValueError):
    """Invalid input to a store operation (empty text, bad metadata, bad top_k)."""


class ProviderError(KnowledgeStoreError):
    """The embedding backend could not produce a usable vector.

    Never escapes ``KnowledgeStore.add`` or ``KnowledgeStore.search``; the store
    routes it to the deterministic fallback embedding.
    """


class PersistenceWarning(UserWarning):
    """The snapshot could not be written or read. In-memory state is kept."""
