"""Custom exceptions for VibeClaw."""


class VibeClawError(Exception):
    """Base exception for VibeClaw."""

    pass


class ConfigurationError(VibeClawError):
    """Configuration-related errors."""

    pass


class CatalogError(VibeClawError):
    """Vibe Index catalog errors (transport, bad payload)."""

    pass


class CatalogAPIError(CatalogError):
    """Catalog API answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ToolError(VibeClawError):
    """Tool execution errors."""

    pass


class ToolExecutionError(ToolError):
    """Tool execution failed."""

    def __init__(self, tool_name: str, message: str):
        super().__init__(f"Tool '{tool_name}' failed: {message}")
        self.tool_name = tool_name


class ToolNotFoundError(ToolError):
    """Tool not found in registry."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool not found: {tool_name}")
        self.tool_name = tool_name
