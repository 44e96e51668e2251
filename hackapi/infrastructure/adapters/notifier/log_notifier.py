import logging
from typing import Any, Dict, Optional

from hackapi.domain.ports.notifier import NotifierPort


class LogNotifier(NotifierPort):
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    async def trigger(self, event_name: str, data: Dict[str, Any], logger: Optional[logging.Logger] = None) -> None:
        (logger or self.logger).info(f"EVENT {event_name}: {data}")
