"""Vibe Index API client.

Searches the catalog, fetches install info, and lists trending skills,
plugins, MCP servers and marketplaces.
"""

from __future__ import annotations

from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from vibeclaw.config import CatalogConfig
from vibeclaw.exceptions import CatalogAPIError, CatalogError
from vibeclaw.logging import get_logger

log = get_logger(__name__)

DEFAULT_BASE_URL = "https://vibeindex.ai/api/v1"
USER_AGENT = "VibeClaw/0.1.0"

RESOURCE_TYPES: tuple[str, ...] = ("skill", "plugin", "mcp", "marketplace")
TRENDING_PERIODS: tuple[str, ...] = ("day", "week", "month")

ResourceType = Literal["skill", "plugin", "mcp", "marketplace"]
TrendingPeriod = Literal["day", "week", "month"]


class _CatalogModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _null_to_default(cls, data: Any) -> Any:
        """Explicit nulls fall back to the field default instead of failing the record."""
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key, value in data.items():
            field = cls.model_fields.get(key)
            if value is None and field is not None and not field.is_required():
                if field.get_default(call_default_factory=True) is not None:
                    cleaned.pop(key)
        return cleaned


class DeepScanResult(_CatalogModel):
    """Third-party deep scan verdict attached to a resource."""

    is_safe: bool
    max_severity: str = ""
    findings_count: int = 0


class ResourceBadges(_CatalogModel):
    official: bool = False
    verified: bool = False
    trending: bool = False


class StarInfo(_CatalogModel):
    count: int = 0
    inherited: bool = False


class VibeResource(_CatalogModel):
    """A skill, plugin, MCP server or marketplace indexed by Vibe Index."""

    id: str
    name: str
    slug: str = ""
    description: str | None = None
    description_ko: str | None = None
    resource_type: ResourceType = "skill"
    github_owner: str | None = None
    github_repo: str | None = None
    github_url: str | None = None
    stars: int = 0
    tags: list[str] = Field(default_factory=list)
    is_official: bool = False
    is_verified: bool = False
    security_score: float | None = None
    security_flags: list[str] | None = None
    cisco_scan_result: DeepScanResult | None = None
    relevance_score: float | None = None
    badges: ResourceBadges | None = None
    star_info: StarInfo | None = None
    computed_install_command: str | None = None

    @property
    def star_count(self) -> int:
        """Displayed star count, preferring inherited star info."""
        if self.star_info is not None:
            return self.star_info.count
        return self.stars


class TrendingResource(VibeResource):
    star_growth: int | None = None
    growth_percent: float | None = None


class Pagination(_CatalogModel):
    limit: int = 0
    offset: int = 0
    total: int = 0


class SearchResult(_CatalogModel):
    success: bool = False
    data: list[VibeResource] = Field(default_factory=list)
    pagination: Pagination | None = None


class InstallAlternative(_CatalogModel):
    name: str
    type: str = ""


class InstallInfo(_CatalogModel):
    name: str
    type: str = ""
    github_url: str = ""
    install_command: str = ""
    alternatives: list[InstallAlternative] = Field(default_factory=list)


class InstallInfoResult(_CatalogModel):
    success: bool = False
    data: InstallInfo | None = None


class TrendingResult(_CatalogModel):
    success: bool = False
    data: list[TrendingResource] = Field(default_factory=list)


class VibeIndexClient:
    """Async client for the Vibe Index REST API."""

    def __init__(
        self,
        api_key: str = "",
        base_url: str | None = None,
        timeout: float = 20.0,
    ):
        self.api_key = str(api_key or "").strip()
        self.base_url = str(base_url or DEFAULT_BASE_URL).rstrip("/")
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        self.client = httpx.AsyncClient(
            timeout=max(1.0, float(timeout)),
            follow_redirects=True,
            headers=headers,
        )

    @classmethod
    def from_config(cls, cfg: CatalogConfig) -> "VibeIndexClient":
        return cls(api_key=cfg.api_key, base_url=cfg.base_url, timeout=cfg.timeout)

    async def _request(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET an endpoint and return the decoded JSON object."""
        url = f"{self.base_url}{endpoint}"
        query = {
            key: str(value)
            for key, value in (params or {}).items()
            if value is not None and str(value) != ""
        }
        try:
            response = await self.client.get(url, params=query)
        except httpx.HTTPError as exc:
            log.error("Catalog request failed", endpoint=endpoint, error=str(exc))
            raise CatalogError(f"Vibe Index request failed: {exc}") from exc

        if not response.is_success:
            reason = str(getattr(response, "reason_phrase", "") or "").strip()
            detail = f"{response.status_code} {reason}".strip()
            log.error("Catalog API error", endpoint=endpoint, status=response.status_code)
            raise CatalogAPIError(f"Vibe Index API error: {detail}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogError("Vibe Index returned invalid JSON.") from exc
        if not isinstance(payload, dict):
            raise CatalogError("Unexpected Vibe Index response format.")
        return payload

    @staticmethod
    def _parse(model: type[_CatalogModel], payload: dict[str, Any], endpoint: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            log.error("Catalog payload rejected", endpoint=endpoint, error=str(exc))
            raise CatalogError(f"Unexpected Vibe Index payload from {endpoint}") from exc

    async def search(
        self,
        query: str,
        type: str | None = None,
        limit: int = 5,
        offset: int = 0,
    ) -> SearchResult:
        """Search for resources by keyword."""
        payload = await self._request(
            "/search",
            {
                "q": query,
                "type": type or "",
                "limit": int(limit),
                "offset": int(offset),
            },
        )
        return self._parse(SearchResult, payload, "/search")

    async def get_install_info(self, name: str, type: str | None = None) -> InstallInfoResult:
        """Get install command and source for a specific resource."""
        payload = await self._request("/install", {"name": name, "type": type or ""})
        return self._parse(InstallInfoResult, payload, "/install")

    async def trending(
        self,
        period: str = "week",
        type: str | None = None,
        limit: int = 5,
    ) -> TrendingResult:
        """Get trending resources."""
        payload = await self._request(
            "/trending",
            {
                "period": period or "week",
                "type": type or "",
                "limit": int(limit),
            },
        )
        return self._parse(TrendingResult, payload, "/trending")

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()
