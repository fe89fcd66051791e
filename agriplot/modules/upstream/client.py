"""
HTTP client for the land-claim backend ("get area", "create/update farm plot").
"""

import logging
from typing import Any, Dict, Optional

import httpx

from agriplot.config import settings
from agriplot.modules.plots.coordinates import coerce_ring
from agriplot.modules.upstream.schemas import AreaSnapshot, FarmRecord

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The backend answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UpstreamUnavailable(UpstreamError):
    """The backend could not be reached (offline, DNS, timeout)."""


def is_network_error(exc: BaseException) -> bool:
    """True for connectivity failures: no response was received at all."""
    return isinstance(exc, (httpx.TransportError, UpstreamUnavailable))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Backend returned HTTP {response.status_code}"


def parse_area(data: Dict[str, Any]) -> AreaSnapshot:
    """Build an AreaSnapshot from a ``GET /area/{id}`` body (``{"area": {...}}``)."""
    area = data.get("area", data)
    farms = [
        FarmRecord(
            farm_id=str(f.get("Farm_ID")),
            soil_type=f.get("Soil_Type") or "",
            soil_suitability=f.get("Soil_Suitability") or "",
            hectares=str(f.get("Hectares") or "0.00"),
            status=f.get("Status") or "",
            ring=coerce_ring(f.get("coordinates") or []),
        )
        for f in area.get("farm") or []
    ]
    return AreaSnapshot(
        area_id=str(area.get("Area_ID")),
        name=area.get("Area_Name") or "",
        boundary=coerce_ring(area.get("coordinates") or []),
        farms=farms,
    )


class UpstreamClient:
    """
    Async client for the land-claim backend.

    Every call forwards the field user's bearer token.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.UPSTREAM_API_URL
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def close(self):
        """Close HTTP client."""
        await self._client.aclose()

    async def _request(self, method: str, url: str, token: str, json: Optional[dict] = None) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        try:
            response = await self._client.request(method, url, json=json, headers=headers)
        except httpx.TransportError as e:
            logger.warning(f"Backend unreachable for {method} {url}: {e!r}")
            raise UpstreamUnavailable(str(e) or "Network Error") from e

        if response.is_error:
            message = _error_message(response)
            logger.error(f"Backend error {response.status_code} for {method} {url}: {message}")
            raise UpstreamError(message, status_code=response.status_code)
        return response

    async def get_area(self, area_id: str, token: str) -> AreaSnapshot:
        response = await self._request("GET", f"/area/{area_id}", token)
        snapshot = parse_area(response.json())
        logger.info(
            f"Loaded area {area_id}: {len(snapshot.boundary)} boundary points, "
            f"{len(snapshot.farms)} farms"
        )
        return snapshot

    async def create_farm_plot(self, area_id: str, farm_data: dict, token: str) -> None:
        await self._request("POST", f"/area/{area_id}/farm", token, json=farm_data)

    async def update_farm_plot(self, area_id: str, farm_id: str, farm_data: dict, token: str) -> None:
        """Coordinates and farm data are updated through separate routes, coordinates first."""
        await self._request(
            "PUT",
            f"/area/{area_id}/farm/{farm_id}/coordinates",
            token,
            json={"coordinates": farm_data["coordinates"]},
        )
        data_fields = {k: v for k, v in farm_data.items() if k != "coordinates"}
        await self._request("PUT", f"/area/{area_id}/farm/{farm_id}/data", token, json=data_fields)

    async def submit_plot(self, area_id: str, farm_data: dict, token: str, farm_id: Optional[str] = None) -> None:
        if farm_id:
            await self.update_farm_plot(area_id, farm_id, farm_data, token)
        else:
            await self.create_farm_plot(area_id, farm_data, token)


def submission_endpoint(area_id: str, farm_id: Optional[str] = None) -> str:
    if farm_id:
        return f"/area/{area_id}/farm/{farm_id}"
    return f"/area/{area_id}/farm"


# Singleton instance
_upstream_client: Optional[UpstreamClient] = None


def get_upstream_client() -> UpstreamClient:
    """Get or create upstream client singleton."""
    global _upstream_client
    if _upstream_client is None:
        _upstream_client = UpstreamClient()
    return _upstream_client


async def close_upstream_client():
    global _upstream_client
    if _upstream_client is not None:
        await _upstream_client.close()
        _upstream_client = None
