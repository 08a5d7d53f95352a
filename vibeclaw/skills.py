"""Skill installation pipeline: name sanitizing, SKILL.md probing, install tracking."""

from __future__ import annotations

import json
import os
import re
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote, urlparse

import httpx
import yaml

from vibeclaw.config import Config
from vibeclaw.logging import get_logger

log = get_logger(__name__)

RAW_GITHUB_BASE_URL = "https://raw.githubusercontent.com"
DEFAULT_BRANCHES: tuple[str, ...] = ("main", "master")
SKILL_FILENAME = "SKILL.md"
RECORD_FILENAME = ".vibeclaw.json"
INSTALLED_BY = "vibeclaw"
FRONTMATTER_DELIMITER = "---"

_UNSAFE_NAME_CHARS_RE = re.compile(r"[^A-Za-z0-9_.-]")

# Repo layouts probed for SKILL.md, most common first. Each layout is tried
# on every branch before moving on to the next one.
_SKILL_MD_LAYOUTS: tuple[str, ...] = (
    "skills/{name}/SKILL.md",
    "SKILL.md",
    "src/skills/{name}/SKILL.md",
)


@dataclass
class InstallRecord:
    """Tracking metadata written next to every installed SKILL.md."""

    installed_by: str
    installed_at: str
    source: str
    source_url: str
    skill_name: str

    def to_dict(self) -> dict[str, str]:
        return {
            "installedBy": self.installed_by,
            "installedAt": self.installed_at,
            "source": self.source,
            "sourceUrl": self.source_url,
            "skillName": self.skill_name,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "InstallRecord":
        return cls(
            installed_by=str(payload.get("installedBy", "") or ""),
            installed_at=str(payload.get("installedAt", "") or ""),
            source=str(payload.get("source", "") or ""),
            source_url=str(payload.get("sourceUrl", "") or ""),
            skill_name=str(payload.get("skillName", "") or ""),
        )


@dataclass
class SkillDownload:
    content: str
    url: str


@dataclass
class SkillInstallResult:
    success: bool
    skill_name: str
    install_path: str | None = None
    source_url: str | None = None
    error: str | None = None
    already_installed: bool = False


@dataclass
class InstalledSkill:
    name: str
    path: str
    record: InstallRecord
    description: str = ""


def sanitize_skill_name(raw_name: str, skills_dir: Path | str) -> str | None:
    """Return a filesystem-safe skill directory name, or None if rejected.

    Pure path arithmetic only; the filesystem is never touched.
    """
    sanitized = _UNSAFE_NAME_CHARS_RE.sub("", str(raw_name or ""))
    if not sanitized or ".." in sanitized or sanitized.startswith("."):
        return None
    root = os.path.abspath(os.fspath(skills_dir))
    resolved = os.path.abspath(os.path.join(root, sanitized))
    if not resolved.startswith(root.rstrip(os.sep) + os.sep):
        return None
    return sanitized


def candidate_skill_md_urls(
    owner: str,
    repo: str,
    skill_name: str,
    branches: Sequence[str] = DEFAULT_BRANCHES,
    raw_base_url: str = RAW_GITHUB_BASE_URL,
) -> list[str]:
    """Ordered raw URLs where a skill's SKILL.md might live."""
    base = f"{str(raw_base_url).rstrip('/')}/{quote(owner, safe='')}/{quote(repo, safe='')}"
    name = quote(str(skill_name or ""), safe="")
    return [
        f"{base}/{quote(branch, safe='')}/{layout.format(name=name)}"
        for layout in _SKILL_MD_LAYOUTS
        for branch in branches
    ]


def looks_like_skill_md(content: str) -> bool:
    """Heuristic check for a frontmatter-delimited SKILL.md with a name field."""
    text = str(content or "")
    if not text.startswith(FRONTMATTER_DELIMITER):
        return False
    end = text.find(FRONTMATTER_DELIMITER, 3)
    if end <= 3:
        return False
    return "name:" in text[3:end]


async def download_skill_md(client: Any, urls: Iterable[str]) -> SkillDownload | None:
    """Fetch candidate URLs in order and return the first valid SKILL.md."""
    for url in urls:
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            log.debug("SKILL.md probe failed", url=url, error=str(exc))
            continue
        if not response.is_success:
            log.debug("SKILL.md probe miss", url=url, status=response.status_code)
            continue
        content = str(response.text or "")
        if looks_like_skill_md(content):
            return SkillDownload(content=content, url=url)
        log.debug("SKILL.md probe rejected content", url=url)
    return None


def parse_github_repo(url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from a github.com URL."""
    raw_url = str(url or "").strip()
    if not raw_url:
        return None
    parsed = urlparse(raw_url)
    if parsed.scheme.lower() not in {"https", "http"}:
        return None
    if parsed.netloc.lower() not in {"github.com", "www.github.com"}:
        return None
    path_parts = [unquote(part).strip() for part in parsed.path.split("/") if part.strip()]
    if len(path_parts) < 2:
        return None
    owner, repo = path_parts[0], path_parts[1]
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not owner or not repo:
        return None
    return owner, repo


def _parse_frontmatter(content: str) -> dict[str, Any]:
    text = (content or "").replace("\r\n", "\n").replace("\r", "\n")
    if not text.startswith("---"):
        return {}
    end = text.find("\n---", 3)
    if end < 0:
        return {}
    block = text[4:end]
    try:
        parsed = yaml.safe_load(block)
    except yaml.YAMLError:
        return {}
    if not isinstance(parsed, dict):
        return {}
    return parsed


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SkillInstaller:
    """Installs SKILL.md files under a single skills root and tracks them."""

    def __init__(
        self,
        skills_dir: Path | str,
        branches: Sequence[str] = DEFAULT_BRANCHES,
        raw_base_url: str = RAW_GITHUB_BASE_URL,
        skill_filename: str = SKILL_FILENAME,
        record_filename: str = RECORD_FILENAME,
        installed_by: str = INSTALLED_BY,
        timeout: float = 30.0,
        client: Any | None = None,
    ):
        self.skills_dir = Path(os.path.abspath(Path(skills_dir).expanduser()))
        self.branches = tuple(branches) or DEFAULT_BRANCHES
        self.raw_base_url = raw_base_url
        self.skill_filename = skill_filename
        self.record_filename = record_filename
        self.installed_by = installed_by
        self.client = client or httpx.AsyncClient(
            timeout=max(1.0, float(timeout)),
            follow_redirects=True,
            headers={"User-Agent": "VibeClaw/0.1.0 (Skill Installer)"},
        )

    @classmethod
    def from_config(cls, cfg: Config, client: Any | None = None) -> "SkillInstaller":
        """Build an installer with the skills root resolved once from config."""
        return cls(
            skills_dir=cfg.resolved_skills_dir(),
            branches=cfg.sources.branches,
            raw_base_url=cfg.sources.raw_base_url,
            skill_filename=cfg.skills.skill_filename,
            record_filename=cfg.skills.record_filename,
            installed_by=cfg.skills.installed_by,
            timeout=cfg.sources.timeout,
            client=client,
        )

    def _sanitize(self, skill_name: str) -> str | None:
        return sanitize_skill_name(skill_name, self.skills_dir)

    def _read_record(self, skill_dir: Path) -> InstallRecord | None:
        record_path = skill_dir / self.record_filename
        try:
            payload = json.loads(record_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        if not isinstance(payload, dict):
            return None
        return InstallRecord.from_dict(payload)

    async def install(
        self,
        owner: str,
        repo: str,
        skill_name: str,
        force: bool = False,
    ) -> SkillInstallResult:
        """Download a skill's SKILL.md from GitHub into ``<skills_dir>/<name>/``."""
        safe_name = self._sanitize(skill_name)
        if not safe_name:
            return SkillInstallResult(
                success=False,
                skill_name=skill_name,
                error=(
                    f'Invalid skill name "{skill_name}". '
                    "Names must be alphanumeric with hyphens/underscores only."
                ),
            )

        skill_dir = self.skills_dir / safe_name
        if self._read_record(skill_dir) is not None and not force:
            return SkillInstallResult(
                success=True,
                skill_name=skill_name,
                install_path=str(skill_dir),
                already_installed=True,
            )

        urls = candidate_skill_md_urls(
            owner,
            repo,
            skill_name,
            branches=self.branches,
            raw_base_url=self.raw_base_url,
        )
        download = await download_skill_md(self.client, urls)
        if download is None:
            log.warning("SKILL.md not found", repo=f"{owner}/{repo}", skill=skill_name, tried=len(urls))
            return SkillInstallResult(
                success=False,
                skill_name=skill_name,
                error=(
                    f'Could not find {self.skill_filename} for "{skill_name}" in {owner}/{repo}. '
                    "Tried multiple paths."
                ),
            )

        record = InstallRecord(
            installed_by=self.installed_by,
            installed_at=_utc_timestamp(),
            source=f"github:{owner}/{repo}",
            source_url=download.url,
            skill_name=skill_name,
        )
        try:
            skill_dir.mkdir(parents=True, exist_ok=True)
            # Content first: a crash before the record leaves an untracked dir.
            (skill_dir / self.skill_filename).write_text(download.content, encoding="utf-8")
            (skill_dir / self.record_filename).write_text(
                json.dumps(record.to_dict(), indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            log.error("Skill write failed", skill=skill_name, path=str(skill_dir), error=str(exc))
            return SkillInstallResult(
                success=False,
                skill_name=skill_name,
                error=f"Failed to write skill files to {skill_dir}: {exc}",
            )

        log.info("Skill installed", skill=skill_name, path=str(skill_dir), source_url=download.url)
        return SkillInstallResult(
            success=True,
            skill_name=skill_name,
            install_path=str(skill_dir),
            source_url=download.url,
        )

    def list_installed(self) -> list[str]:
        """Names of skill directories carrying a valid install record."""
        try:
            entries = sorted(self.skills_dir.iterdir(), key=lambda entry: entry.name)
        except OSError:
            return []
        return [
            entry.name
            for entry in entries
            if entry.is_dir() and self._read_record(entry) is not None
        ]

    def get_installed_meta(self, skill_name: str) -> InstallRecord | None:
        """Install record for a tracked skill, or None."""
        safe_name = self._sanitize(skill_name)
        if not safe_name:
            return None
        return self._read_record(self.skills_dir / safe_name)

    def describe_installed(self) -> list[InstalledSkill]:
        """Tracked skills with their records and SKILL.md descriptions."""
        described: list[InstalledSkill] = []
        for name in self.list_installed():
            skill_dir = self.skills_dir / name
            record = self._read_record(skill_dir)
            if record is None:
                continue
            description = ""
            try:
                frontmatter = _parse_frontmatter(
                    (skill_dir / self.skill_filename).read_text(encoding="utf-8")
                )
                description = str(frontmatter.get("description", "") or "").strip()
            except (OSError, ValueError):
                pass
            described.append(
                InstalledSkill(name=name, path=str(skill_dir), record=record, description=description)
            )
        return described

    def uninstall(self, skill_name: str) -> bool:
        """Remove a tracked skill directory. Untracked directories are left alone."""
        safe_name = self._sanitize(skill_name)
        if not safe_name:
            return False
        skill_dir = self.skills_dir / safe_name
        if self._read_record(skill_dir) is None:
            return False
        try:
            shutil.rmtree(skill_dir)
        except OSError as exc:
            log.error("Skill uninstall failed", skill=skill_name, path=str(skill_dir), error=str(exc))
            return False
        log.info("Skill uninstalled", skill=skill_name, path=str(skill_dir))
        return True

    async def close(self) -> None:
        """Close HTTP client."""
        aclose = getattr(self.client, "aclose", None)
        if callable(aclose):
            await aclose()
