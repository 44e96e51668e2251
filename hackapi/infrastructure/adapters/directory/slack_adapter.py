import httpx
from typing import Optional

from hackapi.domain.models.identity import DirectoryProfile
from hackapi.domain.ports.directory import DirectoryLookupError, DirectoryPort


class SlackDirectory(DirectoryPort):
    def __init__(self, api_token: str, api_url: str = "https://slack.com/api", transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_token = api_token
        self.url = f"{api_url.rstrip('/')}/users.info"
        self.transport = transport

    async def lookup(self, handle: str) -> DirectoryProfile:
        headers = {"Authorization": f"Bearer {self.api_token}"}

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.get(self.url, params={"user": handle}, headers=headers, timeout=10.0)
                response.raise_for_status()
                result = response.json()
            except (httpx.HTTPError, ValueError) as e:
                raise DirectoryLookupError(handle, str(e))

        if not result.get("ok"):
            raise DirectoryLookupError(handle, f"the response was not OK ({result.get('error', 'unknown error')})")

        user = result.get("user") or {}
        profile = user.get("profile") or {}

        if not user.get("id") or not user.get("name"):
            raise DirectoryLookupError(handle, "the response did not contain a user")

        return DirectoryProfile(
            id=user["id"],
            name=user["name"],
            email=profile.get("email"),
        )
