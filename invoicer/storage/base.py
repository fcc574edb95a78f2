from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Where exported invoice documents are kept."""

    @abstractmethod
    def save(self, key: str, data: bytes, content_type: str = "application/pdf") -> str:
        """Save data and return the storage path."""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes: ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a stored document. Missing keys are ignored."""
        ...

    @abstractmethod
    def get_url(self, key: str) -> str: ...
