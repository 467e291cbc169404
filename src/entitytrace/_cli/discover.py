"""Utilities to discover entities in user scripts and modules.

This module was adapted from `fastapi_cli.discover` of package `fastapi-cli` version 0.0.8 (77e6d1f).
"""

from __future__ import annotations

import importlib
import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from entitytrace._entity import Entity

if TYPE_CHECKING:
    from pathlib import Path
    from types import ModuleType

    from .config import EntitySource

logger = logging.getLogger(__name__)


@dataclass
class ModuleData:
    """Module data for a Python module."""

    module_import_str: str
    extra_sys_path: Path
    module_paths: list[Path]


def get_module_data_from_path(path: Path) -> ModuleData:
    """Get module data from a file path.

    Args:
        path: Path to a Python file or package

    Returns:
        ModuleData containing module import information

    """
    use_path = path.resolve()
    module_path = use_path.parent if use_path.is_file() and use_path.stem == "__init__" else use_path
    module_paths = [module_path]
    extra_sys_path = module_path.parent
    # Climb while the parent is still a package so the import string is fully qualified.
    for parent in module_path.parents:
        if not (parent / "__init__.py").is_file():
            break
        module_paths.insert(0, parent)
        extra_sys_path = parent.parent

    return ModuleData(
        module_import_str=".".join(p.stem for p in module_paths),
        extra_sys_path=extra_sys_path.resolve(),
        module_paths=module_paths,
    )


def module_entities(module: ModuleType) -> dict[str, Entity[Any]]:
    """Collect the public module-level entities in definition order."""
    return {
        name: obj for name, obj in vars(module).items() if not name.startswith("_") and isinstance(obj, Entity)
    }


def find_root_entities(entities: dict[str, Entity[Any]]) -> dict[str, Entity[Any]]:
    """Select the entities no other given entity depends on.

    An entity counts as used when it appears anywhere below another entity,
    either as an operand or as a scope condition of a leaf. Entities are
    compared by identity since `==` on entities builds a new traced entity.

    Args:
        entities: Candidate entities by variable name.

    Returns:
        The subset of `entities` that are not used by any other candidate.

    """
    used: set[int] = set()

    def mark_below(entity: Entity[Any]) -> None:
        for child in (*entity.operands, *entity.conditions):
            if id(child) in used:
                continue
            used.add(id(child))
            mark_below(child)

    for entity in entities.values():
        mark_below(entity)

    return {name: entity for name, entity in entities.items() if id(entity) not in used}


def _select_entity(module: ModuleType, entity_name: str | None) -> Entity[Any]:
    module_name = module.__name__
    if entity_name:
        if not hasattr(module, entity_name):
            msg = f"Could not find entity '{entity_name}' in {module_name}"
            raise ValueError(msg)
        entity = getattr(module, entity_name)
        if not isinstance(entity, Entity):
            msg = f"'{entity_name}' in {module_name} is not an Entity instance"
            raise TypeError(msg)
        return entity

    roots = find_root_entities(module_entities(module))
    if not roots:
        msg = f"Could not find any Entity in {module_name}, try using --entity"
        raise ValueError(msg)
    if len(roots) > 1:
        names = ", ".join(roots)
        msg = f"Found several root entities in {module_name} ({names}), try using --entity"
        raise ValueError(msg)

    name, entity = next(iter(roots.items()))
    logger.debug("Found root entity: %s", name)
    return entity


def load_entity_from_script(script_path: Path, entity_name: str | None = None) -> Entity[Any]:
    """Load an entity from a Python script path.

    Args:
        script_path: Path to the Python script defining the entities
        entity_name: Name of the entity variable. If None, the single root entity is used

    Returns:
        The loaded Entity

    Raises:
        ImportError: If the module cannot be imported
        ValueError: If the entity is missing or no single root entity exists
        TypeError: If the specified variable is not an Entity instance

    """
    module_data = get_module_data_from_path(script_path)
    sys.path.insert(0, str(module_data.extra_sys_path))

    try:
        module = importlib.import_module(module_data.module_import_str)
    except (ImportError, ValueError):
        logger.exception("Import error")
        logger.warning("Ensure all the package directories have an __init__.py file")
        raise

    return _select_entity(module, entity_name)


def load_entity_from_module_path(module_path: str) -> Entity[Any]:
    """Load an entity from a module path (e.g., 'examples.state_demo:total').

    Args:
        module_path: Module path in format 'module.path:variable_name'

    Returns:
        The loaded Entity

    Raises:
        ValueError: If module path format is invalid or the variable is missing
        TypeError: If the specified variable is not an Entity instance

    """
    if ":" not in module_path:
        msg = "Module path must be in format 'module.path:variable_name'"
        raise ValueError(msg)

    module_name, entity_name = module_path.split(":", 1)
    module = importlib.import_module(module_name)
    return _select_entity(module, entity_name)


def load_entity_from_source(source: EntitySource, entity_name: str | None = None) -> Entity[Any]:
    """Load an entity from a configured source.

    Args:
        source: ScriptSource or ModuleSource from the config
        entity_name: Overrides the configured variable name of a ScriptSource

    Returns:
        The loaded Entity

    """
    from .config import ModuleSource, ScriptSource  # noqa: PLC0415

    match source:
        case ScriptSource(script=script, name=name):
            return load_entity_from_script(script, entity_name or name)
        case ModuleSource(module_path=module_path):
            return load_entity_from_module_path(module_path)
