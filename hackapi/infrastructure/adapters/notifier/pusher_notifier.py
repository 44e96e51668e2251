import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from hackapi.domain.ports.notifier import NotifierPort


class PusherNotifier(NotifierPort):
    """
    Publishes events through the Pusher HTTP API.

    `pusher_url` has the form `https://<key>:<secret>@<host>/apps/<app_id>`.
    Delivery problems are logged and otherwise ignored. One pooled client
    is kept for all events; `aclose` releases it on shutdown.
    """

    def __init__(
        self,
        pusher_url: str,
        channel: str = "api_events",
        timeout: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        url = httpx.URL(pusher_url)
        self.key = url.username
        self.secret = url.password
        self.channel = channel
        self.path = f"{url.path.rstrip('/')}/events"
        self.client = httpx.AsyncClient(
            base_url=f"{url.scheme}://{url.netloc.decode('ascii')}",
            timeout=timeout,
            transport=transport,
        )
        self.logger = logging.getLogger(__name__)

    async def trigger(self, event_name: str, data: Dict[str, Any], logger: Optional[logging.Logger] = None) -> None:
        log = logger or self.logger
        body = json.dumps({
            "name": event_name,
            "channels": [self.channel],
            "data": json.dumps(data),
        })

        log.info(f"Sending event {event_name} to Pusher channel {self.channel}")

        try:
            response = await self.client.post(
                self.path,
                content=body,
                params=self._sign(body),
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.error(f"Unable to send event {event_name} to Pusher: {e}")

    async def aclose(self) -> None:
        await self.client.aclose()

    def _sign(self, body: str) -> Dict[str, str]:
        params = {
            "auth_key": self.key,
            "auth_timestamp": str(int(time.time())),
            "auth_version": "1.0",
            "body_md5": hashlib.md5(body.encode("utf-8")).hexdigest(),
        }
        query = "&".join(f"{k}={params[k]}" for k in sorted(params))
        to_sign = f"POST\n{self.path}\n{query}"
        params["auth_signature"] = hmac.new(
            self.secret.encode("utf-8"), to_sign.encode("utf-8"), hashlib.sha256
        ).hexdigest()
        return params
