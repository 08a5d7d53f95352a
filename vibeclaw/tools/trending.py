"""Trending resources tool."""

from typing import Any

from vibeclaw.catalog import RESOURCE_TYPES, TRENDING_PERIODS, VibeIndexClient
from vibeclaw.config import Config, get_config
from vibeclaw.exceptions import CatalogError
from vibeclaw.formatting import format_resource
from vibeclaw.logging import get_logger
from vibeclaw.tools.registry import Tool, ToolResult
from vibeclaw.tools.search import clamp_limit, normalize_resource_type

log = get_logger(__name__)

_PERIOD_LABELS = {"day": "today", "week": "this week", "month": "this month"}


class TrendingTool(Tool):
    """Show what is gaining stars in the Vibe Index ecosystem."""

    name = "vibeclaw_trending"
    description = (
        "Get trending skills, plugins, and MCP servers from the Vibe Index ecosystem. "
        "Shows what's gaining the most stars recently. Use when the user asks what's "
        "popular or trending."
    )
    parameters = {
        "type": "object",
        "properties": {
            "period": {
                "type": "string",
                "enum": list(TRENDING_PERIODS),
                "description": "Time period for trending calculation (default: week)",
            },
            "type": {
                "type": "string",
                "enum": list(RESOURCE_TYPES),
                "description": "Filter by resource type",
            },
            "limit": {
                "type": "number",
                "description": "Number of results (1-10, default 5)",
            },
        },
    }

    def __init__(self, catalog: VibeIndexClient, config: Config | None = None):
        self.catalog = catalog
        self.config = config or get_config()

    async def execute(
        self,
        period: str | None = None,
        type: str | None = None,
        limit: int | None = None,
        **kwargs: Any,
    ) -> ToolResult:
        effective_period = str(period or "week").strip().lower()
        if effective_period not in TRENDING_PERIODS:
            effective_period = "week"
        resource_type = normalize_resource_type(type)

        try:
            result = await self.catalog.trending(
                period=effective_period,
                type=resource_type,
                limit=clamp_limit(limit, self.config),
            )
        except CatalogError as e:
            log.error("Trending lookup failed", period=effective_period, error=str(e))
            return ToolResult(success=False, error=f"Error fetching trending: {e}")

        if not result.success or not result.data:
            return ToolResult(success=True, content="No trending data available right now.")

        threshold = self.config.security.risk_threshold
        output = f"Trending {resource_type or 'resources'} {_PERIOD_LABELS[effective_period]} on Vibe Index:\n\n"
        for idx, resource in enumerate(result.data, start=1):
            output += format_resource(resource, idx, threshold) + "\n"
        output += "Use vibeclaw_install to install any of these."
        return ToolResult(success=True, content=output)
