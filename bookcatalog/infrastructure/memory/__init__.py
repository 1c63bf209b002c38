from .in_memory_repositories import InMemoryBookRepository, InMemoryCategoryRepository

__all__ = ["InMemoryBookRepository", "InMemoryCategoryRepository"]
