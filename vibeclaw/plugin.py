"""VibeClaw plugin: skill discovery for OpenClaw-style agent hosts.

Connects the host agent to the Vibe Index ecosystem. When the agent meets a
task it cannot handle, it can search the catalog, vet a skill's security scan
and install its SKILL.md so the next session picks it up.
"""

from __future__ import annotations

from typing import Any

from vibeclaw.catalog import VibeIndexClient
from vibeclaw.config import Config, get_config
from vibeclaw.exceptions import ToolNotFoundError
from vibeclaw.logging import get_logger
from vibeclaw.skills import SkillInstaller
from vibeclaw.tools import (
    AuditTool,
    InstallTool,
    ManageTool,
    SearchTool,
    Tool,
    ToolRegistry,
    TrendingTool,
)

log = get_logger(__name__)

TOOL_NAMES: tuple[str, ...] = (
    "vibeclaw_search",
    "vibeclaw_install",
    "vibeclaw_trending",
    "vibeclaw_manage",
    "vibeclaw_audit",
)

PROMPT_CONTEXT = "\n".join(
    [
        "",
        "## VibeClaw - Skill Discovery",
        "",
        "You have access to VibeClaw tools that connect to the Vibe Index ecosystem "
        "(skills, plugins, and MCP servers).",
        "",
        "**When to use VibeClaw:**",
        "- When you cannot fulfill a user's request because a required skill/tool is not installed",
        "- When the user asks about available tools, trending skills, or recommendations",
        "- When the user wants to install a new capability",
        "",
        "**How to use:**",
        "1. Use `vibeclaw_search` to find relevant skills by describing the capability needed",
        "2. Use `vibeclaw_install` to download and install a skill directly from GitHub into {skills_dir}",
        "3. Use `vibeclaw_trending` to show what's popular in the ecosystem",
        "4. Use `vibeclaw_manage` to list or uninstall VibeClaw-installed skills",
        "5. Use `vibeclaw_audit` to check security scan results before or after installing",
        "",
        "**Important:** When you cannot handle a request (e.g., 'check my email', 'what's the weather'),",
        "DO NOT just say you can't do it. Instead, use vibeclaw_search to find a skill that can,",
        "then use vibeclaw_install to install it. The skill will be available on next session.",
        "",
    ]
)


class VibeClawPlugin:
    """Host-facing plugin object."""

    id = "vibeclaw"
    name = "VibeClaw"
    description = (
        "Zero-config skill discovery: search, recommend, and install skills "
        "from the Vibe Index ecosystem"
    )

    def __init__(
        self,
        config: Config | None = None,
        catalog: VibeIndexClient | None = None,
        installer: SkillInstaller | None = None,
    ):
        self.config = config or get_config()
        self.catalog = catalog or VibeIndexClient.from_config(self.config.catalog)
        self.installer = installer or SkillInstaller.from_config(self.config)
        self.registry = ToolRegistry()
        self._registered = False

    def create_tools(self) -> list[Tool]:
        return [
            SearchTool(self.catalog, self.config),
            InstallTool(self.catalog, self.installer, self.config),
            TrendingTool(self.catalog, self.config),
            ManageTool(self.installer),
            AuditTool(self.catalog, self.installer, self.config),
        ]

    def register(self, registry: ToolRegistry | None = None) -> ToolRegistry:
        """Register all VibeClaw tools into the host registry (or our own)."""
        target = registry if registry is not None else self.registry
        for tool in self.create_tools():
            target.register(tool)
        self.registry = target
        self._registered = True
        log.info(
            "VibeClaw plugin registered",
            tools=list(TOOL_NAMES),
            skills_dir=str(self.installer.skills_dir),
        )
        return target

    def before_prompt_build(self, system_prompt: str | None) -> str | None:
        """Append VibeClaw usage guidance to a non-empty system prompt."""
        if not system_prompt:
            return system_prompt
        return system_prompt + PROMPT_CONTEXT.format(skills_dir=self.installer.skills_dir)

    async def execute(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Run a registered tool and return its text payload."""
        if not self._registered:
            self.register()
        try:
            result = await self.registry.execute(name, arguments)
        except ToolNotFoundError as e:
            return str(e)
        return result.text

    async def close(self) -> None:
        """Close HTTP clients."""
        await self.catalog.close()
        await self.installer.close()
