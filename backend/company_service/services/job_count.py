import logging

import httpx

logger = logging.getLogger(__name__)


class JobCountClient:
    """Best-effort lookup of a company's job count in the job service."""

    def __init__(self, base_url: str, timeout: float = 3.0, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    async def count_for(self, company_id: str) -> int:
        try:
            response = await self._client.get(f"/api/jobs/company/{company_id}/count")
        except httpx.HTTPError as exc:
            logger.warning("Job count lookup failed for %s: %s", company_id, exc)
            return 0
        if response.status_code != 200:
            logger.warning("Job count lookup for %s returned %s", company_id, response.status_code)
            return 0
        try:
            data = response.json()
            return int((data.get("data") or {}).get("count") or 0)
        except (ValueError, TypeError, AttributeError):
            logger.warning("Unexpected job count payload for %s", company_id)
            return 0

    async def aclose(self):
        await self._client.aclose()
