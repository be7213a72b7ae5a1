"""
Example: Basic knowledge store usage.

Adds a few health documents and searches them. Without a configured
embedding provider the store uses its deterministic fallback embedding.
"""

from datetime import datetime

from health_kb import KnowledgeStore


def main():
    store = KnowledgeStore()

    print("=== Adding documents ===")

    store.add(
        "Diabetes risk factors include obesity and family history.",
        {"title": "Diabetes", "category": "diabetes", "dateAdded": datetime.now()},
    )
    store.add(
        "Heart disease prevention focuses on diet and exercise.",
        {"title": "Heart", "category": "cardiovascular", "dateAdded": datetime.now()},
    )
    store.add(
        "Adults should aim for 7 to 9 hours of sleep per night.",
        {"title": "Sleep", "category": "general", "dateAdded": datetime.now()},
    )

    print("=== Searching ===")

    results = store.search("exercise and diet for heart health", top_k=2)
    for result in results:
        print(f"\nScore: {result.score:.3f}")
        print(f"Title: {result.record.title}")
        print(f"Text: {result.record.text[:50]}...")

    print("\n=== Prompt context ===")
    print(store.format_context(results))

    print("=== Store Statistics ===")
    for key, value in store.stats().items():
        print(f"{key}: {value}")


if __name__ == "__main__":
    main()
