import json
from pathlib import Path
from typing import Any

import pytest

from vibeclaw.catalog import InstallInfoResult, SearchResult, VibeResource
from vibeclaw.config import Config
from vibeclaw.exceptions import CatalogError
from vibeclaw.skills import SkillInstaller
from vibeclaw.tools.install import InstallTool

SKILL_MD = (
    "---\n"
    "name: pdf-reader\n"
    "description: Read and summarize PDF files.\n"
    "---\n\n"
    "# PDF Reader\n"
)


class _FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class _RawGitHubClient:
    def __init__(self, available: dict[str, str] | None = None):
        self.available = dict(available or {})
        self.calls: list[str] = []

    async def get(self, url: str, **kwargs):
        self.calls.append(url)
        if url in self.available:
            return _FakeResponse(self.available[url])
        return _FakeResponse("Not Found", status_code=404)


class _FakeCatalog:
    def __init__(
        self,
        resources: list[dict[str, Any]] | None = None,
        install_info: dict[str, Any] | None = None,
        error: Exception | None = None,
    ):
        self.resources = list(resources or [])
        self.install_info = install_info
        self.error = error
        self.searches: list[dict[str, Any]] = []
        self.install_lookups: list[str] = []

    async def search(self, query: str, type: str | None = None, limit: int = 5, offset: int = 0):
        self.searches.append({"query": query, "type": type, "limit": limit})
        if self.error is not None:
            raise self.error
        return SearchResult.model_validate({"success": True, "data": self.resources[:limit]})

    async def get_install_info(self, name: str, type: str | None = None):
        self.install_lookups.append(name)
        if self.install_info is None:
            return InstallInfoResult(success=False)
        return InstallInfoResult.model_validate({"success": True, "data": self.install_info})


def _resource(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "res-1",
        "name": "pdf-reader",
        "slug": "pdf-reader",
        "description": "Read and summarize PDF files.",
        "resource_type": "skill",
        "github_owner": "acme",
        "github_repo": "pdf-tools",
        "github_url": "https://github.com/acme/pdf-tools",
        "stars": 42,
        "security_score": 0,
    }
    payload.update(overrides)
    return payload


def _tool(tmp_path: Path, catalog: _FakeCatalog, http: _RawGitHubClient) -> InstallTool:
    installer = SkillInstaller(skills_dir=tmp_path / "skills", client=http)
    return InstallTool(catalog=catalog, installer=installer, config=Config())


ROOT_URL = "https://raw.githubusercontent.com/acme/pdf-tools/main/SKILL.md"


@pytest.mark.asyncio
async def test_install_tool_installs_top_match(tmp_path: Path):
    catalog = _FakeCatalog([_resource()])
    http = _RawGitHubClient({ROOT_URL: SKILL_MD})
    tool = _tool(tmp_path, catalog, http)

    result = await tool.execute(query="pdf reader")

    skill_dir = tmp_path / "skills" / "pdf-reader"
    assert result.success is True
    assert 'Installed "pdf-reader" successfully!' in result.content
    assert f"Location: {skill_dir}" in result.content
    assert f"Source: {ROOT_URL}" in result.content
    assert "Stars: 42" in result.content
    assert "Security: Pre-scanned (no issues)" in result.content
    assert catalog.searches == [{"query": "pdf reader", "type": "skill", "limit": 1}]
    record = json.loads((skill_dir / ".vibeclaw.json").read_text(encoding="utf-8"))
    assert record["source"] == "github:acme/pdf-tools"


@pytest.mark.asyncio
async def test_unsafe_deep_scan_blocks_zero_score_without_download(tmp_path: Path):
    catalog = _FakeCatalog(
        [
            _resource(
                security_score=0,
                security_flags=["credential_access"],
                cisco_scan_result={"is_safe": False, "max_severity": "HIGH", "findings_count": 2},
            )
        ]
    )
    http = _RawGitHubClient({ROOT_URL: SKILL_MD})
    tool = _tool(tmp_path, catalog, http)

    result = await tool.execute(query="pdf reader")

    assert result.success is False
    assert result.content.startswith('BLOCKED: "pdf-reader" failed Vibe Index security scan.')
    assert "Severity: HIGH" in result.text
    assert "credential_access" in result.text
    assert http.calls == []
    assert not (tmp_path / "skills").exists()


@pytest.mark.asyncio
async def test_risk_score_at_threshold_blocks(tmp_path: Path):
    catalog = _FakeCatalog([_resource(security_score=25, security_flags=["shell_exec"])])
    http = _RawGitHubClient({ROOT_URL: SKILL_MD})
    tool = _tool(tmp_path, catalog, http)

    result = await tool.execute(query="pdf reader")

    assert result.success is False
    assert "high security risk score (25)" in result.text
    assert http.calls == []


@pytest.mark.asyncio
async def test_risk_score_below_threshold_installs(tmp_path: Path):
    catalog = _FakeCatalog([_resource(security_score=24)])
    http = _RawGitHubClient({ROOT_URL: SKILL_MD})
    tool = _tool(tmp_path, catalog, http)

    result = await tool.execute(query="pdf reader")

    assert result.success is True
    assert "Minor flags (score: 24)" in result.content
    assert (tmp_path / "skills" / "pdf-reader" / "SKILL.md").is_file()


@pytest.mark.asyncio
async def test_no_catalog_match_is_not_found(tmp_path: Path):
    tool = _tool(tmp_path, _FakeCatalog([]), _RawGitHubClient())

    result = await tool.execute(query="does-not-exist")

    assert result.success is False
    assert result.error == 'Could not find skill "does-not-exist" in Vibe Index.'


@pytest.mark.asyncio
async def test_missing_repository_reports_manual_link(tmp_path: Path):
    catalog = _FakeCatalog(
        [_resource(github_owner=None, github_repo=None, github_url="https://gitlab.com/acme/pdf-tools")]
    )
    tool = _tool(tmp_path, catalog, _RawGitHubClient())

    result = await tool.execute(query="pdf reader")

    assert result.success is False
    assert "has no GitHub repository" in result.text
    assert "Manual link: https://gitlab.com/acme/pdf-tools" in result.text
    assert catalog.install_lookups == ["pdf-reader"]


@pytest.mark.asyncio
async def test_repository_recovered_from_github_url(tmp_path: Path):
    catalog = _FakeCatalog(
        [_resource(github_owner=None, github_repo=None, github_url="https://github.com/acme/pdf-tools.git")]
    )
    http = _RawGitHubClient({ROOT_URL: SKILL_MD})
    tool = _tool(tmp_path, catalog, http)

    result = await tool.execute(query="pdf reader")

    assert result.success is True
    assert catalog.install_lookups == []


@pytest.mark.asyncio
async def test_repository_recovered_from_install_info(tmp_path: Path):
    catalog = _FakeCatalog(
        [_resource(github_owner=None, github_repo=None, github_url=None)],
        install_info={"name": "pdf-reader", "type": "skill", "github_url": "https://github.com/acme/pdf-tools"},
    )
    http = _RawGitHubClient({ROOT_URL: SKILL_MD})
    tool = _tool(tmp_path, catalog, http)

    result = await tool.execute(query="pdf reader")

    assert result.success is True
    assert catalog.install_lookups == ["pdf-reader"]


@pytest.mark.asyncio
async def test_second_install_reports_already_installed(tmp_path: Path):
    catalog = _FakeCatalog([_resource()])
    http = _RawGitHubClient({ROOT_URL: SKILL_MD})
    tool = _tool(tmp_path, catalog, http)

    await tool.execute(query="pdf reader")
    result = await tool.execute(query="pdf reader")

    assert result.success is True
    assert "is already installed" in result.content
    assert "force: true" in result.content


@pytest.mark.asyncio
async def test_source_not_found_surfaces_installer_error(tmp_path: Path):
    tool = _tool(tmp_path, _FakeCatalog([_resource()]), _RawGitHubClient())

    result = await tool.execute(query="pdf reader")

    assert result.success is False
    assert result.error.startswith('Failed to install "pdf-reader": Could not find SKILL.md')


@pytest.mark.asyncio
async def test_catalog_failure_becomes_text_result(tmp_path: Path):
    catalog = _FakeCatalog(error=CatalogError("Vibe Index request failed: boom"))
    tool = _tool(tmp_path, catalog, _RawGitHubClient())

    result = await tool.execute(query="pdf reader")

    assert result.success is False
    assert result.error == "Error installing skill: Vibe Index request failed: boom"
