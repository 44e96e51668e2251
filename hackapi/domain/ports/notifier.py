import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class NotifierPort(ABC):
    @abstractmethod
    async def trigger(self, event_name: str, data: Dict[str, Any], logger: Optional[logging.Logger] = None) -> None:
        """Best-effort delivery; implementations must not raise on delivery failure."""
        pass

    async def aclose(self) -> None:
        """Releases connections held by the sink."""
        pass
