from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Protocol

import typer

logger = logging.getLogger(__name__)


class CommandModule(Protocol):
    app: typer.Typer


def _import_module(module_name: str) -> object | None:
    try:
        return importlib.import_module(module_name)
    except ImportError as exc:
        logger.error("Failed to import command module %s: %s", module_name, exc)
        return None


def discover_commands(
    package_path: Path, package: str = "errorlearning.commands"
) -> list[tuple[str, CommandModule]]:
    """Discover Typer command modules in ``package_path``.

    Returns:
        (name, module) pairs; the name is the module stem with dashes.
    """
    typer_modules: list[tuple[str, CommandModule]] = []

    for file in sorted(package_path.glob("*.py")):
        if file.name.startswith("_"):
            continue
        module = _import_module(f"{package}.{file.stem}")
        if module is None:
            continue

        app = getattr(module, "app", None)
        if isinstance(app, typer.Typer):
            typer_modules.append((file.stem.replace("_", "-"), module))  # type: ignore[arg-type]
        else:
            logger.error("Command module %s has no Typer app", file.stem)

    return typer_modules
