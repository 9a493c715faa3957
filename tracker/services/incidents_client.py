import logging

import httpx

logger = logging.getLogger(__name__)

# Host used for in-process requests; never resolved
INTERNAL_BASE_URL = "http://tracker.internal"


class IncidentsClientError(Exception):
    def __init__(self, status_code: int, detail):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {self.message}")

    @property
    def message(self) -> str:
        if isinstance(self.detail, list):
            return "; ".join(
                f"{'.'.join(str(part) for part in error.get('loc', []))}: {error.get('msg')}"
                for error in self.detail
            )
        return str(self.detail)

    @property
    def field_errors(self) -> dict[str, str]:
        """Map field name to message for validation failures."""
        if not isinstance(self.detail, list):
            return {}
        errors = {}
        for error in self.detail:
            loc = error.get("loc") or ["__all__"]
            errors.setdefault(str(loc[-1]), error.get("msg", "Invalid value"))
        return errors


class IncidentsClient:
    """Thin async wrapper around the ``/api/incidents`` endpoints."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    @classmethod
    def for_app(cls, app, base_url: str | None = None, timeout: float = 10.0) -> "IncidentsClient":
        if base_url:
            http = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)
        else:
            http = httpx.AsyncClient(
                transport=httpx.ASGITransport(app=app),
                base_url=INTERNAL_BASE_URL,
                timeout=timeout,
            )
        return cls(http)

    async def list(self, params: dict) -> dict:
        return await self._request("GET", "/api/incidents", params=params)

    async def get(self, incident_id: str) -> dict:
        return await self._request("GET", f"/api/incidents/{incident_id}")

    async def create(self, data: dict) -> dict:
        return await self._request("POST", "/api/incidents", json=data)

    async def update(self, incident_id: str, data: dict) -> dict:
        return await self._request("PATCH", f"/api/incidents/{incident_id}", json=data)

    async def delete(self, incident_id: str) -> dict:
        return await self._request("DELETE", f"/api/incidents/{incident_id}")

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Incidents API unreachable (%s %s): %s", method, url, e)
            raise IncidentsClientError(503, f"Incidents API unreachable: {type(e).__name__}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            detail = body.get("detail", body) if isinstance(body, dict) else body
            raise IncidentsClientError(response.status_code, detail)
        return response.json()
