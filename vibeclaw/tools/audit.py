"""Security audit of catalog skills and of already-installed skills."""

from typing import Any

from vibeclaw.catalog import VibeIndexClient, VibeResource
from vibeclaw.config import Config, get_config
from vibeclaw.exceptions import CatalogError
from vibeclaw.logging import get_logger
from vibeclaw.security import check_security, format_score, format_security_badge
from vibeclaw.skills import SkillInstaller
from vibeclaw.tools.registry import Tool, ToolResult

log = get_logger(__name__)


class AuditTool(Tool):
    """Report Vibe Index security verdicts for one skill or every installed skill."""

    name = "vibeclaw_audit"
    description = (
        "Check Vibe Index security scan results. With a query, report the verdict for that "
        "skill before installing it. Without a query, re-check every VibeClaw-installed skill "
        "against the latest scan data and flag the ones that would now be blocked."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Skill name to audit. Omit to audit all installed skills.",
            },
        },
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

    async def _lookup(self, name: str) -> VibeResource | None:
        result = await self.catalog.search(name, type="skill", limit=1)
        if not result.success or not result.data:
            return None
        return result.data[0]

    def _report(self, skill: VibeResource) -> list[str]:
        threshold = self.config.security.risk_threshold
        lines = [f'Security report for "{skill.name}":']
        if skill.github_url:
            lines.append(f"  GitHub: {skill.github_url}")
        scan = skill.cisco_scan_result
        if scan is not None:
            verdict = "safe" if scan.is_safe else "unsafe"
            lines.append(
                f"  Deep scan: {verdict} (severity: {scan.max_severity or 'n/a'}, "
                f"findings: {scan.findings_count})"
            )
        else:
            lines.append("  Deep scan: not available")
        if skill.security_score is not None:
            lines.append(f"  Risk score: {format_score(skill.security_score)} (threshold {threshold})")
        else:
            lines.append("  Risk score: not available")
        if skill.security_flags:
            lines.append(f"  Flags: {', '.join(skill.security_flags)}")
        blocked = check_security(skill, threshold) is not None
        lines.append(f"  Status: {format_security_badge(skill, threshold)}")
        lines.append(f"  Verdict: {'BLOCKED - cannot be installed' if blocked else 'allowed'}")
        return lines

    async def execute(self, query: str | None = None, **kwargs: Any) -> ToolResult:
        q = str(query or "").strip()
        if q:
            return await self._audit_one(q)
        return await self._audit_installed()

    async def _audit_one(self, query: str) -> ToolResult:
        try:
            skill = await self._lookup(query)
        except CatalogError as e:
            log.error("Audit lookup failed", query=query, error=str(e))
            return ToolResult(success=False, error=f"Error auditing skill: {e}")
        if skill is None:
            return ToolResult(success=False, error=f'Could not find skill "{query}" in Vibe Index.')
        return ToolResult(success=True, content="\n".join(self._report(skill)))

    async def _audit_installed(self) -> ToolResult:
        installed = self.installer.describe_installed()
        if not installed:
            return ToolResult(success=True, content="No skills installed via VibeClaw yet.")

        threshold = self.config.security.risk_threshold
        flagged: list[str] = []
        lines = [f"Audit of {len(installed)} VibeClaw-installed skill(s):", ""]
        for entry in installed:
            name = entry.record.skill_name or entry.name
            try:
                skill = await self._lookup(name)
            except CatalogError as e:
                log.warning("Audit lookup failed", skill=name, error=str(e))
                lines.append(f"  - {entry.name}: lookup failed ({e})")
                continue
            if skill is None or skill.name.lower() != name.lower():
                lines.append(f"  - {entry.name}: not found in Vibe Index")
                continue
            if check_security(skill, threshold) is not None:
                flagged.append(entry.name)
                lines.append(f"  - {entry.name}: BLOCKED by current scan data ({format_security_badge(skill, threshold)})")
            else:
                lines.append(f"  - {entry.name}: {format_security_badge(skill, threshold)}")

        lines.append("")
        if flagged:
            lines.append(
                f"{len(flagged)} installed skill(s) would now be blocked: {', '.join(flagged)}. "
                "Consider removing them with vibeclaw_manage uninstall."
            )
        else:
            lines.append("No installed skill is currently flagged.")
        return ToolResult(success=True, content="\n".join(lines))
