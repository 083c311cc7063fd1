"""CLI command modules, discovered at startup by core.registry."""
