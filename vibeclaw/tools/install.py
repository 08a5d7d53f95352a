"""Skill install tool: catalog lookup, security gate, GitHub download."""

from typing import Any

from vibeclaw.catalog import VibeIndexClient, VibeResource
from vibeclaw.config import Config, get_config
from vibeclaw.exceptions import CatalogError
from vibeclaw.logging import get_logger
from vibeclaw.security import check_security, format_security_badge
from vibeclaw.skills import SkillInstaller, parse_github_repo
from vibeclaw.tools.registry import Tool, ToolResult

log = get_logger(__name__)


class InstallTool(Tool):
    """Find a skill in Vibe Index and install its SKILL.md from GitHub."""

    name = "vibeclaw_install"
    description = (
        "Install a skill directly from GitHub into OpenClaw. Downloads the SKILL.md file and "
        "places it in the OpenClaw skills directory so it loads automatically. Use after "
        "vibeclaw_search finds a skill the user wants. The skill becomes available on the "
        "next agent session."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Skill name or search query to find and install",
            },
            "force": {
                "type": "boolean",
                "description": "Reinstall even if already installed (default: false)",
            },
        },
        "required": ["query"],
    }

    def __init__(
        self,
        catalog: VibeIndexClient,
        installer: SkillInstaller,
        config: Config | None = None,
    ):
        self.catalog = catalog
        self.installer = installer
        self.config = config or get_config()

    async def _resolve_github_source(self, skill: VibeResource) -> tuple[str, str] | None:
        """Owner/repo from the catalog record, its GitHub URL, or install info."""
        owner = str(skill.github_owner or "").strip()
        repo = str(skill.github_repo or "").strip()
        if owner and repo:
            return owner, repo

        parsed = parse_github_repo(skill.github_url or "")
        if parsed:
            return parsed

        try:
            info = await self.catalog.get_install_info(skill.name, type="skill")
        except CatalogError as e:
            log.warning("Install info lookup failed", skill=skill.name, error=str(e))
            return None
        if not info.success or info.data is None:
            return None
        return parse_github_repo(info.data.github_url)

    async def execute(
        self,
        query: str,
        force: bool = False,
        **kwargs: Any,
    ) -> ToolResult:
        """Install the best catalog match for the query."""
        q = str(query or "").strip()
        if not q:
            return ToolResult(success=False, error="Missing required query")

        try:
            search = await self.catalog.search(q, type="skill", limit=1)
        except CatalogError as e:
            log.error("Catalog lookup for install failed", query=q, error=str(e))
            return ToolResult(success=False, error=f"Error installing skill: {e}")

        if not search.success or not search.data:
            return ToolResult(success=False, error=f'Could not find skill "{q}" in Vibe Index.')

        skill = search.data[0]
        source = await self._resolve_github_source(skill)
        if source is None:
            message = f'Found "{skill.name}" but it has no GitHub repository. Cannot install automatically.'
            if skill.github_url:
                message += f"\nManual link: {skill.github_url}"
            return ToolResult(success=False, error=message)

        threshold = self.config.security.risk_threshold
        blocked = check_security(skill, threshold)
        if blocked:
            log.warning(
                "Skill install blocked by security gate",
                skill=skill.name,
                score=skill.security_score,
                deep_scan_safe=(skill.cisco_scan_result.is_safe if skill.cisco_scan_result else None),
            )
            return ToolResult(success=False, content=blocked, error="blocked")

        owner, repo = source
        result = await self.installer.install(owner, repo, skill.name, force=bool(force))

        if not result.success:
            return ToolResult(success=False, error=f'Failed to install "{skill.name}": {result.error}')

        if result.already_installed:
            return ToolResult(
                success=True,
                content=(
                    f'"{skill.name}" is already installed at {result.install_path}.\n'
                    "Use force: true to reinstall.\n"
                    "The skill is available in your next agent session."
                ),
            )

        lines = [
            f'Installed "{result.skill_name}" successfully!',
            "",
            f"  Location: {result.install_path}",
            f"  Source: {result.source_url}",
            f"  Stars: {skill.star_count}",
            f"  Security: {format_security_badge(skill, threshold)}",
        ]
        if skill.description:
            lines.append(f"  Description: {skill.description}")
        lines.extend(
            [
                "",
                "**The skill will be available in your next agent session.**",
                "Restart the agent or start a new session to use it.",
            ]
        )
        return ToolResult(success=True, content="\n".join(lines))
