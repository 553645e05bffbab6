"""
Blockly workspace JSON <-> Workspace conversion.

The accepted form is what ``Blockly.serialization.workspaces.save`` produces:

    {
        "blocks": {"languageVersion": 0, "blocks": [<top-level block>, ...]},
        "variables": [{"name": "ball", "id": "..."}, ...]
    }

where each block is ``{"type", "id", "fields", "inputs", "next"}`` and inputs are
``{"NAME": {"block": {...}, "shadow": {...}}}``.
"""

import logging
from typing import Any, Dict, List, Optional

from .block_registry import BlockRegistry, get_default_registry
from .models import Block, ValidationError, VariableRef, Workspace
from .symbols import ConstantRegistry, VariableTable


logger = logging.getLogger(__name__)


def workspace_from_dict(data: Any,
                        variables: Optional[VariableTable] = None,
                        constants: Optional[ConstantRegistry] = None,
                        registry: Optional[BlockRegistry] = None) -> Workspace:
    """Build a ``Workspace`` from Blockly workspace JSON.

    Variables listed in ``data`` are merged into ``variables`` (a new table when
    omitted): unknown ids are added and known ids take the listed name. Blocks of
    kinds the registry does not know are still loaded.

    Raises:
        ValidationError: ``data`` is not a workspace object, or a block is malformed.
    """
    if not isinstance(data, dict):
        raise ValidationError("Workspace JSON must be an object")

    registry = registry or get_default_registry()
    table = variables if variables is not None else VariableTable()
    _merge_variables(table, data.get('variables') or [])

    section = data.get('blocks') or {}
    if isinstance(section, dict):
        raw_heads = section.get('blocks') or []
    elif isinstance(section, list):
        raw_heads = section
    else:
        raise ValidationError("'blocks' must be an object or a list")

    loader = _BlockLoader(registry)
    workspace = Workspace(
        variables=table,
        constants=constants if constants is not None else ConstantRegistry(),
    )
    for index, raw in enumerate(raw_heads):
        workspace.add_chain(loader.load_chain(raw, f'blocks[{index}]'))

    logger.debug(
        f"Loaded workspace: {len(workspace.top_level_chains)} chain(s), "
        f"{workspace.block_count()} block(s), {len(table)} variable(s)"
    )
    return workspace


def workspace_to_dict(workspace: Workspace) -> Dict[str, Any]:
    """Serialise a workspace back to Blockly workspace JSON."""
    return workspace.to_dict()


def _merge_variables(table: VariableTable, entries: List[Any]):
    if not isinstance(entries, list):
        raise ValidationError("'variables' must be a list")

    for entry in entries:
        if not isinstance(entry, dict) or 'name' not in entry:
            raise ValidationError(f"Malformed variable entry: {entry!r}")
        name = str(entry['name'])
        var_id = entry.get('id')
        if var_id is None:
            table.ensure(name)
        elif var_id not in table:
            table.create(name, var_id=str(var_id))
        elif table.get_name(var_id) != name:
            table.rename(var_id, name)


class _BlockLoader:
    """Recursive loader; slot kinds come from the registry shape when known."""

    def __init__(self, registry: BlockRegistry):
        self.registry = registry

    def load_chain(self, raw: Any, path: str, as_value: bool = False) -> Block:
        """Load ``raw`` and every block linked after it through ``next``."""
        head = previous = None
        while raw is not None:
            block = self.load_block(raw, path, as_value)
            if previous is None:
                head = block
            else:
                previous.next = block
            previous = block

            link = raw.get('next')
            raw = link.get('block') if isinstance(link, dict) else None
            path += '.next'
        return head

    def load_block(self, raw: Any, path: str, as_value: bool = False) -> Block:
        if not isinstance(raw, dict):
            raise ValidationError(f"{path}: block must be an object")
        kind_name = raw.get('type')
        if not kind_name or not isinstance(kind_name, str):
            raise ValidationError(f"{path}: block has no 'type'")

        kind = self.registry.get(kind_name)
        block = Block(
            kind=kind_name,
            fields=self._load_fields(raw.get('fields') or {}, path),
            produces_value=kind.produces_value if kind is not None else as_value,
        )
        if raw.get('id'):
            block.id = str(raw['id'])
        if kind is not None:
            block.value_slots = {slot.name: None for slot in kind.value_slots}
            block.statement_slots = {name: None for name in kind.statement_slots}

        inputs = raw.get('inputs') or {}
        if not isinstance(inputs, dict):
            raise ValidationError(f"{path}: 'inputs' must be an object")

        for slot, entry in inputs.items():
            child_raw = None
            if isinstance(entry, dict):
                child_raw = entry.get('block') or entry.get('shadow')
            if child_raw is None:
                continue

            child_path = f'{path}.inputs.{slot}'
            if self._is_statement_input(kind, slot, child_raw):
                block.statement_slots[slot] = self.load_chain(child_raw, child_path)
            else:
                block.value_slots[slot] = self.load_block(child_raw, child_path, as_value=True)

        if block.produces_value and isinstance(raw.get('next'), dict) and raw['next'].get('block'):
            raise ValidationError(f"{path}: value block '{kind_name}' cannot have a next block")

        return block

    def _is_statement_input(self, kind, slot: str, child_raw: Any) -> bool:
        if kind is not None:
            if kind.has_statement_slot(slot):
                return True
            if kind.has_value_slot(slot):
                return False

        # Unknown kind or undeclared slot: classify by the child's own shape
        if isinstance(child_raw, dict):
            child_type = child_raw.get('type')
            child_kind = self.registry.get(child_type) if isinstance(child_type, str) else None
            if child_kind is not None:
                return not child_kind.produces_value
            return 'next' in child_raw
        return False

    def _load_fields(self, raw_fields: Any, path: str) -> Dict[str, Any]:
        if not isinstance(raw_fields, dict):
            raise ValidationError(f"{path}: 'fields' must be an object")

        fields = {}
        for name, value in raw_fields.items():
            if isinstance(value, dict) and 'id' in value:
                fields[name] = VariableRef(str(value['id']), str(value.get('name', '')))
            else:
                fields[name] = value
        return fields
