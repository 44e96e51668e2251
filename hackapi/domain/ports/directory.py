from abc import ABC, abstractmethod

from hackapi.domain.models.identity import DirectoryProfile


class DirectoryLookupError(Exception):
    def __init__(self, handle: str, reason: str):
        self.handle = handle
        super().__init__(f'Could not look-up user "{handle}" on the directory: {reason}')


class DirectoryPort(ABC):
    @abstractmethod
    async def lookup(self, handle: str) -> DirectoryProfile:
        """Resolves a handle to a profile. Raises DirectoryLookupError."""
        pass
