"""Plain-text rendering of catalog resources for tool output."""

import re

from vibeclaw.catalog import TrendingResource, VibeResource
from vibeclaw.security import DEFAULT_RISK_THRESHOLD, format_security_badge

_DESCRIPTION_MAX_CHARS = 120


def clean_text(value: str | None, max_chars: int = _DESCRIPTION_MAX_CHARS) -> str:
    """Normalize whitespace and bound output size."""
    cleaned = re.sub(r"\s+", " ", (value or "")).strip()
    if len(cleaned) <= max_chars:
        return cleaned
    return cleaned[:max_chars] + "..."


def resource_badges(resource: VibeResource) -> list[str]:
    badges = resource.badges
    labels: list[str] = []
    if resource.is_official or (badges is not None and badges.official):
        labels.append("Official")
    if resource.is_verified or (badges is not None and badges.verified):
        labels.append("Verified")
    if badges is not None and badges.trending:
        labels.append("Trending")
    return labels


def format_resource(
    resource: VibeResource,
    index: int,
    threshold: int = DEFAULT_RISK_THRESHOLD,
) -> str:
    """Render one numbered catalog entry."""
    labels = resource_badges(resource)
    badge_str = f" [{', '.join(labels)}]" if labels else ""
    description = clean_text(resource.description) or "No description"
    lines = [
        f"{index}. **{resource.name}** ({resource.resource_type.upper()}) - {resource.star_count} stars{badge_str}",
        f"   {description}",
        f"   Security: {format_security_badge(resource, threshold)}",
    ]
    if resource.github_url:
        lines.append(f"   GitHub: {resource.github_url}")
    if isinstance(resource, TrendingResource) and resource.star_growth:
        lines.append(f"   Growth: +{resource.star_growth} stars")
    return "\n".join(lines) + "\n"


def format_resources(
    resources: list[VibeResource],
    threshold: int = DEFAULT_RISK_THRESHOLD,
) -> str:
    return "\n".join(
        format_resource(resource, idx, threshold)
        for idx, resource in enumerate(resources, start=1)
    )
