"""Tools package for VibeClaw."""

from vibeclaw.tools.registry import (
    Tool,
    ToolRegistry,
    ToolResult,
)
from vibeclaw.tools.search import SearchTool
from vibeclaw.tools.install import InstallTool
from vibeclaw.tools.trending import TrendingTool
from vibeclaw.tools.manage import ManageTool
from vibeclaw.tools.audit import AuditTool

__all__ = [
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "SearchTool",
    "InstallTool",
    "TrendingTool",
    "ManageTool",
    "AuditTool",
]
