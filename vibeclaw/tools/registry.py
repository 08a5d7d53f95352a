"""Tool registry and base tool class."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, model_validator

from vibeclaw.exceptions import ToolExecutionError, ToolNotFoundError
from vibeclaw.logging import get_logger

log = get_logger(__name__)


def _normalize_tool_name(value: str) -> str:
    """Normalize tool names for lookups."""
    return str(value or "").strip().lower()


class ToolResult(BaseModel):
    """Result from tool execution."""

    success: bool = True
    content: str = ""
    error: str | None = None

    @model_validator(mode="after")
    def _normalize_failure_error(self) -> "ToolResult":
        """Ensure failed results always provide an error message."""
        if not self.success and not (self.error or "").strip():
            fallback = (self.content or "").strip()
            self.error = fallback or "Tool execution failed"
        return self

    @property
    def text(self) -> str:
        """Single human-readable payload handed back to the host."""
        if self.success:
            return self.content
        return (self.content or "").strip() or (self.error or "")


class Tool(ABC):
    """Base class for all tools."""

    name: str = ""
    description: str = ""
    parameters: dict[str, Any] = {}

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool.

        Args:
            **kwargs: Tool-specific arguments

        Returns:
            ToolResult with success status and content
        """
        pass

    def get_definition(self) -> dict[str, Any]:
        """Get the tool definition for the host agent.

        Returns:
            OpenAI function-style definition
        """
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def missing_arguments(self, arguments: dict[str, Any]) -> list[str]:
        """Required schema fields absent from the call."""
        required = self.parameters.get("required", [])
        return [field for field in required if field not in arguments]


class ToolRegistry:
    """Registry for managing available tools."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register
        """
        if not tool.name:
            raise ValueError("Tool must have a name")

        log.debug("Registering tool", tool=tool.name)
        self._tools[_normalize_tool_name(tool.name)] = tool

    def unregister(self, name: str) -> None:
        """Unregister a tool."""
        self._tools.pop(_normalize_tool_name(name), None)

    def has_tool(self, name: str) -> bool:
        """Return whether a tool name is currently registered."""
        return _normalize_tool_name(name) in self._tools

    def get(self, name: str) -> Tool:
        """Get a tool by name.

        Raises:
            ToolNotFoundError if not found
        """
        key = _normalize_tool_name(name)
        if key not in self._tools:
            raise ToolNotFoundError(name)
        return self._tools[key]

    def list_tools(self) -> list[str]:
        """List all registered tool names."""
        return [tool.name for tool in self._tools.values()]

    def get_definitions(self) -> list[dict[str, Any]]:
        """Get all tool definitions for the host agent."""
        return [tool.get_definition() for tool in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Execute a tool by name.

        Failures inside the tool come back as an unsuccessful ToolResult.

        Raises:
            ToolNotFoundError if tool not found
        """
        tool = self.get(name)
        args = dict(arguments or {})

        missing = tool.missing_arguments(args)
        if missing:
            return ToolResult(
                success=False,
                error=f"Missing required argument: {', '.join(missing)}",
            )

        log.info("Executing tool", tool=tool.name, args=args)
        try:
            result = await tool.execute(**args)
        except Exception as e:
            log.error("Tool execution failed", tool=tool.name, error=str(e))
            return ToolResult(success=False, error=str(ToolExecutionError(tool.name, str(e))))

        if not isinstance(result, ToolResult):
            return ToolResult(
                success=False,
                error=str(ToolExecutionError(tool.name, "Tool returned invalid result payload")),
            )
        log.info("Tool executed", tool=tool.name, success=result.success)
        return result
