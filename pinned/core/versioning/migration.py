"""Payload Migration Support.

Provides tools for migrating an object's field map forward:
- The object capability consumed by the migrator
- Chain selection over a version catalog
- Builders for common field-map transforms
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Iterable, List, Protocol, runtime_checkable

from pinned.core.versioning.version import Action, FieldMap, Version

logger = logging.getLogger(__name__)


@runtime_checkable
class Migratable(Protocol):
    """An object that can report its current field map."""

    def data(self) -> Dict[str, Any]:
        ...


def type_name_of(obj: Any) -> str:
    """Get the type name used to look up actions for an object.

    An explicit ``type_name`` attribute wins; otherwise the class name is used.
    """
    declared = getattr(obj, "type_name", None)
    if isinstance(declared, str) and declared:
        return declared
    return type(obj).__name__


def select_actions(newer: Iterable[Version], type_name: str) -> List[Action]:
    """Get the transforms to run, in order, for a type.

    Args:
        newer: Versions strictly newer than the starting one, oldest first.
        type_name: Type name keying each change's action map.
    """
    chain: List[Action] = []
    for version in newer:
        chain.extend(version.actions_for(type_name))
    return chain


def run_chain(chain: Iterable[Action], data: FieldMap) -> FieldMap:
    """Thread a field map through a chain of transforms."""
    result = data
    for action in chain:
        result = action(result)
    return result


def migrate(newer: List[Version], obj: Any) -> FieldMap:
    """Migrate an object's field map across the given versions."""
    type_name = type_name_of(obj)
    chain = select_actions(newer, type_name)
    result = dict(obj.data())
    if chain:
        result = run_chain(chain, result)
        logger.debug(
            f"Migrated {type_name} across {len(newer)} version(s)",
            extra={"type_name": type_name, "steps": len(chain)},
        )
    elif not newer:
        logger.debug(f"No migration needed for {type_name}", extra={"type_name": type_name})
    return result


class SchemaTransformBuilder:
    """Builder for composing field-map transforms into one action."""

    def __init__(self):
        self._transforms: List[Callable[[FieldMap], FieldMap]] = []

    def rename_field(self, old_name: str, new_name: str) -> "SchemaTransformBuilder":
        """Rename a field."""
        def transform(data: FieldMap) -> FieldMap:
            if old_name in data:
                data[new_name] = data.pop(old_name)
            return data

        self._transforms.append(transform)
        return self

    def add_field(self, field_name: str, default_value: Any) -> "SchemaTransformBuilder":
        """Add a new field with default value."""
        def transform(data: FieldMap) -> FieldMap:
            if field_name not in data:
                data[field_name] = copy.deepcopy(default_value)
            return data

        self._transforms.append(transform)
        return self

    def remove_field(self, field_name: str) -> "SchemaTransformBuilder":
        """Remove a field."""
        def transform(data: FieldMap) -> FieldMap:
            data.pop(field_name, None)
            return data

        self._transforms.append(transform)
        return self

    def transform_field(
        self,
        field_name: str,
        value_transform: Callable[[Any], Any],
    ) -> "SchemaTransformBuilder":
        """Transform a field value."""
        def transform(data: FieldMap) -> FieldMap:
            if field_name in data:
                data[field_name] = value_transform(data[field_name])
            return data

        self._transforms.append(transform)
        return self

    def nest_fields(
        self,
        parent_field: str,
        child_fields: List[str],
    ) -> "SchemaTransformBuilder":
        """Nest flat fields under a parent object."""
        def transform(data: FieldMap) -> FieldMap:
            nested = {}
            for field_name in child_fields:
                if field_name in data:
                    nested[field_name] = data.pop(field_name)
            if nested:
                data[parent_field] = nested
            return data

        self._transforms.append(transform)
        return self

    def flatten_fields(
        self,
        parent_field: str,
        prefix: str = "",
    ) -> "SchemaTransformBuilder":
        """Flatten nested object to flat fields."""
        def transform(data: FieldMap) -> FieldMap:
            if parent_field in data and isinstance(data[parent_field], dict):
                nested = data.pop(parent_field)
                for key, value in nested.items():
                    data[f"{prefix}{key}"] = value
            return data

        self._transforms.append(transform)
        return self

    def build(self) -> Action:
        """Build the composed action."""
        transforms = list(self._transforms)

        def action(data: FieldMap) -> FieldMap:
            return run_chain(transforms, data)

        return action


def rename(old_name: str, new_name: str) -> Action:
    """Shortcut for a single-rename action."""
    return SchemaTransformBuilder().rename_field(old_name, new_name).build()
