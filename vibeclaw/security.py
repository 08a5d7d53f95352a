"""Install gate based on Vibe Index security scan data."""

from __future__ import annotations

from vibeclaw.catalog import VibeResource

DEFAULT_RISK_THRESHOLD = 25
DETAILS_URL = "https://vibeindex.ai"


def format_score(score: float) -> str:
    return f"{score:g}"


def _flags_line(resource: VibeResource) -> str:
    if not resource.security_flags:
        return ""
    return f"  Flags: {', '.join(resource.security_flags)}\n"


def check_security(resource: VibeResource, threshold: int = DEFAULT_RISK_THRESHOLD) -> str | None:
    """Return a block explanation if the resource must not be installed, else None.

    An unsafe deep scan always blocks, whatever the risk score says.
    """
    scan = resource.cisco_scan_result
    if scan is not None and not scan.is_safe:
        return (
            f'BLOCKED: "{resource.name}" failed Vibe Index security scan.\n\n'
            f"  Severity: {scan.max_severity or 'unknown'}\n"
            f"  Findings: {scan.findings_count} issue(s) detected\n"
            f"{_flags_line(resource)}"
            "\nThis skill has known security issues and cannot be installed.\n"
            f"See {DETAILS_URL} for details."
        )

    score = resource.security_score
    if score is not None and score >= threshold:
        return (
            f'BLOCKED: "{resource.name}" has a high security risk score ({format_score(score)}).\n\n'
            f"{_flags_line(resource)}"
            "\nThis skill has been flagged by Vibe Index security scanning and cannot be installed.\n"
            f"See {DETAILS_URL} for details."
        )

    return None


def format_security_badge(resource: VibeResource, threshold: int = DEFAULT_RISK_THRESHOLD) -> str:
    """Short security status shown next to search results and installs."""
    scan = resource.cisco_scan_result
    if scan is not None:
        if scan.is_safe:
            return "Verified safe (Cisco scan)"
        return f"Failed security scan ({scan.max_severity or 'unknown'} severity)"
    score = resource.security_score
    if score is None:
        return "Scan pending"
    if score == 0:
        return "Pre-scanned (no issues)"
    if score < threshold:
        return f"Minor flags (score: {format_score(score)})"
    return f"High risk (score: {format_score(score)})"
