"""Vibe Index catalog search tool."""

from typing import Any

from vibeclaw.catalog import RESOURCE_TYPES, VibeIndexClient
from vibeclaw.config import Config, get_config
from vibeclaw.exceptions import CatalogError
from vibeclaw.formatting import format_resources
from vibeclaw.logging import get_logger
from vibeclaw.tools.registry import Tool, ToolResult

log = get_logger(__name__)


def clamp_limit(value: Any, cfg: Config) -> int:
    """Clamp a requested result count to 1..tools.max_limit."""
    default = max(1, int(cfg.tools.default_limit))
    if value is None or value == "":
        return min(default, cfg.tools.max_limit)
    try:
        requested = int(value)
    except (TypeError, ValueError):
        requested = default
    return min(max(requested, 1), max(1, int(cfg.tools.max_limit)))


def normalize_resource_type(value: str | None) -> str | None:
    cleaned = str(value or "").strip().lower()
    return cleaned if cleaned in RESOURCE_TYPES else None


class SearchTool(Tool):
    """Search Vibe Index for skills, plugins, MCP servers and marketplaces."""

    name = "vibeclaw_search"
    description = (
        "Search the Vibe Index ecosystem for skills, plugins, MCP servers, and marketplaces. "
        "Use this when the user needs a capability you don't currently have, or when they ask "
        "about available tools. Returns ranked results. After finding a skill, use "
        "vibeclaw_install to install it directly."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": (
                    "Search query describing the capability needed "
                    "(e.g., 'email', 'github pr', 'weather', 'pdf reader')"
                ),
            },
            "type": {
                "type": "string",
                "enum": list(RESOURCE_TYPES),
                "description": "Filter by resource type. Omit to search all types.",
            },
            "limit": {
                "type": "number",
                "description": "Number of results to return (1-10, default 5)",
            },
        },
        "required": ["query"],
    }

    def __init__(self, catalog: VibeIndexClient, config: Config | None = None):
        self.catalog = catalog
        self.config = config or get_config()

    async def execute(
        self,
        query: str,
        type: str | None = None,
        limit: int | None = None,
        **kwargs: Any,
    ) -> ToolResult:
        """Search the catalog and render ranked results."""
        q = str(query or "").strip()
        if not q:
            return ToolResult(success=False, error="Missing required query")

        try:
            result = await self.catalog.search(
                q,
                type=normalize_resource_type(type),
                limit=clamp_limit(limit, self.config),
            )
        except CatalogError as e:
            log.error("Catalog search failed", query=q, error=str(e))
            return ToolResult(success=False, error=f"Error searching Vibe Index: {e}")

        if not result.success or not result.data:
            return ToolResult(
                success=True,
                content=f'No results found for "{q}" in the Vibe Index ecosystem.',
            )

        total = result.pagination.total if result.pagination is not None else len(result.data)
        output = f'Found {total} results for "{q}" in Vibe Index:\n\n'
        output += format_resources(result.data, self.config.security.risk_threshold)
        output += "\nUse vibeclaw_install to install any of these skills directly."
        return ToolResult(success=True, content=output)
