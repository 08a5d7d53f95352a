"""List or uninstall VibeClaw-installed skills."""

from typing import Any

from vibeclaw.formatting import clean_text
from vibeclaw.logging import get_logger
from vibeclaw.skills import SkillInstaller
from vibeclaw.tools.registry import Tool, ToolResult

log = get_logger(__name__)

MANAGE_ACTIONS: tuple[str, ...] = ("list", "uninstall")


class ManageTool(Tool):
    """Local lifecycle management for tracked skills."""

    name = "vibeclaw_manage"
    description = (
        "List or uninstall skills that were installed via VibeClaw. "
        "Use 'list' to see all VibeClaw-installed skills, or 'uninstall' to remove one."
    )
    parameters = {
        "type": "object",
        "properties": {
            "action": {
                "type": "string",
                "enum": list(MANAGE_ACTIONS),
                "description": "Action to perform",
            },
            "skill_name": {
                "type": "string",
                "description": "Skill name to uninstall (required for uninstall action)",
            },
        },
        "required": ["action"],
    }

    def __init__(self, installer: SkillInstaller):
        self.installer = installer

    async def execute(
        self,
        action: str,
        skill_name: str | None = None,
        **kwargs: Any,
    ) -> ToolResult:
        normalized = str(action or "").strip().lower()
        # Hosts that forward camelCase argument names.
        skill_name = skill_name or kwargs.get("skillName")

        if normalized == "list":
            return self._list()
        if normalized == "uninstall":
            return self._uninstall(str(skill_name or "").strip())
        return ToolResult(success=False, error=f"Unknown action: {action}")

    def _list(self) -> ToolResult:
        skills = self.installer.describe_installed()
        if not skills:
            return ToolResult(success=True, content="No skills installed via VibeClaw yet.")
        lines = [f"VibeClaw-installed skills ({len(skills)}):", ""]
        for skill in skills:
            lines.append(f"  - {skill.name}")
            if skill.description:
                lines.append(f"    {clean_text(skill.description)}")
            details = [item for item in (skill.record.source, skill.record.installed_at) if item]
            if details:
                lines.append(f"    {' | '.join(details)}")
        return ToolResult(success=True, content="\n".join(lines))

    def _uninstall(self, skill_name: str) -> ToolResult:
        if not skill_name:
            return ToolResult(success=False, error="Please specify which skill to uninstall.")
        if self.installer.uninstall(skill_name):
            return ToolResult(
                success=True,
                content=f'Uninstalled "{skill_name}". It will be removed on next session.',
            )
        return ToolResult(
            success=False,
            error=f'"{skill_name}" was not found or was not installed via VibeClaw.',
        )
