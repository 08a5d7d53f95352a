from pathlib import Path

import pytest

from vibeclaw.skills import sanitize_skill_name


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("pdf-reader", "pdf-reader"),
        ("gmail_helper", "gmail_helper"),
        ("weather.v2", "weather.v2"),
        ("Event Planner!", "EventPlanner"),
        ("owner/skill", "ownerskill"),
    ],
)
def test_sanitize_keeps_safe_characters(tmp_path: Path, raw: str, expected: str):
    assert sanitize_skill_name(raw, tmp_path / "skills") == expected


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "!!!",
        "../etc",
        "../../home/user/.ssh",
        "a/../b",
        ".hidden",
        "./skill",
        "..",
        "skill..name",
        "..\\windows",
    ],
)
def test_sanitize_rejects_traversal_and_hidden_names(tmp_path: Path, raw: str):
    assert sanitize_skill_name(raw, tmp_path / "skills") is None


def test_sanitize_does_not_touch_filesystem(tmp_path: Path):
    root = tmp_path / "does-not-exist" / "skills"

    assert sanitize_skill_name("pdf-reader", root) == "pdf-reader"
    assert not root.exists()


def test_sanitize_result_stays_inside_root(tmp_path: Path):
    root = tmp_path / "skills"
    name = sanitize_skill_name("nested-skill", root)

    assert name is not None
    resolved = (root / name).resolve()
    assert resolved.parent == root.resolve()
