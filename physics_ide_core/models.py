"""
Core data models for the block compiler.

This module defines the block graph handed over by the editing surface: typed blocks,
their value and statement slots, the opaque variable references stored in fields, and
the workspace that bundles the top-level statement chains with the variable table and
the constant registry.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Iterator, Optional
from enum import Enum
import uuid

from .symbols import VariableTable, ConstantRegistry


class ValidationError(Exception):
    """Exception raised when a block graph or its JSON form is malformed."""
    pass


class BlockShape(Enum):
    """Whether a block yields a value or is a chainable statement."""
    STATEMENT = "statement"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class VariableRef:
    """Opaque reference to an entry of the variable table.

    ``name`` is the display name the editor stored alongside the id; it is only
    used when the id is no longer present in the table.
    """
    id: str
    name: str = ""

    def to_dict(self) -> Dict[str, str]:
        data = {'id': self.id}
        if self.name:
            data['name'] = self.name
        return data


@dataclass
class Block:
    """One typed node in the visual program graph."""
    kind: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    fields: Dict[str, Any] = field(default_factory=dict)
    value_slots: Dict[str, Optional['Block']] = field(default_factory=dict)
    statement_slots: Dict[str, Optional['Block']] = field(default_factory=dict)
    next: Optional['Block'] = None
    produces_value: bool = False

    @property
    def shape(self) -> BlockShape:
        return BlockShape.EXPRESSION if self.produces_value else BlockShape.STATEMENT

    def get_field(self, name: str, default: Any = None) -> Any:
        """Get a field value, or ``default`` when the field is absent."""
        return self.fields.get(name, default)

    def get_value_block(self, slot: str) -> Optional['Block']:
        """Get the block connected to a value slot."""
        return self.value_slots.get(slot)

    def get_statement_head(self, slot: str) -> Optional['Block']:
        """Get the first block of the chain placed in a statement slot."""
        return self.statement_slots.get(slot)

    def has_statement_slot(self, slot: str) -> bool:
        return slot in self.statement_slots

    def iter_chain(self) -> Iterator['Block']:
        """Iterate this block and every block linked after it via ``next``."""
        current: Optional[Block] = self
        while current is not None:
            yield current
            current = current.next

    def walk(self) -> Iterator['Block']:
        """Depth-first iteration over this chain and every nested block."""
        for block in self.iter_chain():
            yield block
            for child in block.value_slots.values():
                if child is not None:
                    yield from child.walk()
            for head in block.statement_slots.values():
                if head is not None:
                    yield from head.walk()

    def validate(self) -> List[ValidationError]:
        """Validate this block's own linkage and return any errors."""
        errors = []

        if self.produces_value and self.next is not None:
            errors.append(ValidationError(
                f"Value block '{self.kind}' ({self.id}) cannot have a next block"))

        for slot, child in self.value_slots.items():
            if child is not None and not child.produces_value:
                errors.append(ValidationError(
                    f"Slot '{slot}' of '{self.kind}' holds statement block '{child.kind}'"))

        for slot, head in self.statement_slots.items():
            if head is not None and head.produces_value:
                errors.append(ValidationError(
                    f"Statement slot '{slot}' of '{self.kind}' holds value block '{head.kind}'"))

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the Blockly workspace JSON block form."""
        data: Dict[str, Any] = {'type': self.kind, 'id': self.id}

        if self.fields:
            data['fields'] = {
                name: value.to_dict() if isinstance(value, VariableRef) else value
                for name, value in self.fields.items()
            }

        inputs = {}
        for slot, child in self.value_slots.items():
            if child is not None:
                inputs[slot] = {'block': child.to_dict()}
        for slot, head in self.statement_slots.items():
            if head is not None:
                inputs[slot] = {'block': head.to_dict()}
        if inputs:
            data['inputs'] = inputs

        if self.next is not None:
            data['next'] = {'block': self.next.to_dict()}

        return data


@dataclass
class Workspace:
    """The top-level statement chains plus the tables they are compiled against.

    The compiler treats a workspace as a read-only snapshot for the duration of one
    compile call; only the editing surface mutates blocks.
    """
    top_level_chains: List[Block] = field(default_factory=list)
    variables: VariableTable = field(default_factory=VariableTable)
    constants: ConstantRegistry = field(default_factory=ConstantRegistry)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_chain(self, head: Block) -> Block:
        """Append a top-level chain and return its head."""
        self.top_level_chains.append(head)
        return head

    def all_blocks(self) -> Iterator[Block]:
        for head in self.top_level_chains:
            yield from head.walk()

    def block_count(self) -> int:
        return sum(1 for _ in self.all_blocks())

    def is_empty(self) -> bool:
        return not self.top_level_chains

    def validate_workspace(self) -> List[ValidationError]:
        """Validate the entire graph and return any errors."""
        # Walking a cyclic graph would not terminate
        if self._has_cycles():
            return [ValidationError("Workspace contains a cycle")]

        errors = []
        for block in self.all_blocks():
            errors.extend(block.validate())
        return errors

    def _has_cycles(self) -> bool:
        """Check whether any block is reachable from itself using DFS."""
        rec_stack = set()

        def dfs(block: Block) -> bool:
            key = id(block)
            if key in rec_stack:
                return True
            rec_stack.add(key)

            children = [block.next]
            children.extend(block.value_slots.values())
            children.extend(block.statement_slots.values())
            for child in children:
                if child is not None and dfs(child):
                    return True

            rec_stack.remove(key)
            return False

        return any(dfs(head) for head in self.top_level_chains)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to Blockly workspace JSON."""
        return {
            'blocks': {
                'languageVersion': 0,
                'blocks': [head.to_dict() for head in self.top_level_chains],
            },
            'variables': [
                {'name': name, 'id': var_id}
                for var_id, name in self.variables.items()
            ],
        }
