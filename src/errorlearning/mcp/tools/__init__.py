"""MCP tools package with auto-discovery.

This package contains the tool implementations:
    - errors: report errors, document solutions, statistics, knowledge base
"""

from __future__ import annotations

import pkgutil
from importlib import import_module

from errorlearning.mcp import ToolFunction, is_mcp_tool, logger

_TOOL_PACKAGE_NAME = "errorlearning.mcp.tools"


def discover_tool_module_names(package_name: str = _TOOL_PACKAGE_NAME) -> list[str]:
    package = import_module(package_name)
    path_list = list(getattr(package, "__path__", []) or [])

    modules: list[str] = []
    for module_info in pkgutil.iter_modules(path_list, prefix=f"{package_name}."):
        if module_info.name.rsplit(".", 1)[-1].startswith("_"):
            continue
        modules.append(module_info.name)
    return sorted(modules)


def discover_tools(package_name: str = _TOOL_PACKAGE_NAME) -> dict[str, ToolFunction]:
    """Map tool name to callable for every @tool function in the package."""
    tools: dict[str, ToolFunction] = {}
    for module_name in discover_tool_module_names(package_name):
        try:
            module = import_module(module_name)
        except ImportError as exc:
            logger.error("Failed to import tool module %s: %s", module_name, exc)
            continue
        for attr_name in dir(module):
            candidate = getattr(module, attr_name)
            if is_mcp_tool(candidate) and getattr(candidate, "__module__", None) == module_name:
                tools[candidate.__name__] = candidate
    return tools


__all__ = ["discover_tool_module_names", "discover_tools"]
