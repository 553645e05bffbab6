"""
Block Registry - the closed set of block kinds the compiler understands.

Each kind pairs a static shape descriptor (fields, value slots with their fallback
literals, statement slots, and whether the block yields a value) with exactly one
generator function. Dispatch is a dictionary lookup on the kind name; new kinds are
added by registering another entry, never by editing a central conditional.

Generators are plain functions:

    statement kinds:   generator(block, ctx) -> str
    expression kinds:  generator(block, ctx) -> (str, Order)

where ``ctx`` is the ``GenerationContext`` of the running compile.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .models import Block


class FieldKind(Enum):
    """Editor widget backing a plain field."""
    TEXT = "text"
    NUMBER = "number"
    VARIABLE = "variable"
    DROPDOWN = "dropdown"
    COLOUR = "colour"


@dataclass(frozen=True)
class FieldSpec:
    """A plain (non-connectable) field on a block."""
    name: str
    kind: FieldKind = FieldKind.TEXT
    default: Any = ""
    options: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = {'name': self.name, 'kind': self.kind.value, 'default': self.default}
        if self.options:
            data['options'] = list(self.options)
        return data


@dataclass(frozen=True)
class ValueSlot:
    """A named socket accepting one expression block.

    ``fallback`` is the literal substituted when nothing is connected. ``None`` means
    the generator drops whatever the slot contributes instead.
    """
    name: str
    fallback: Optional[str]
    check: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'fallback': self.fallback, 'check': self.check}


Generator = Callable[..., Any]


@dataclass
class BlockKind:
    """Static descriptor of one block kind plus its generator."""
    name: str
    generator: Generator
    category: str = "misc"
    fields: Tuple[FieldSpec, ...] = ()
    value_slots: Tuple[ValueSlot, ...] = ()
    statement_slots: Tuple[str, ...] = ()
    produces_value: bool = False
    description: str = ""
    _slots_by_name: Dict[str, ValueSlot] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self._slots_by_name = {slot.name: slot for slot in self.value_slots}

    def get_value_slot(self, name: str) -> Optional[ValueSlot]:
        return self._slots_by_name.get(name)

    def has_value_slot(self, name: str) -> bool:
        return name in self._slots_by_name

    def has_statement_slot(self, name: str) -> bool:
        return name in self.statement_slots

    def get_field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def create_block(self, **field_values: Any) -> Block:
        """Create a block of this kind with default fields and every slot empty."""
        fields = {spec.name: spec.default for spec in self.fields}
        fields.update(field_values)
        return Block(
            kind=self.name,
            fields=fields,
            value_slots={slot.name: None for slot in self.value_slots},
            statement_slots={name: None for name in self.statement_slots},
            produces_value=self.produces_value,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.name,
            'category': self.category,
            'description': self.description,
            'produces_value': self.produces_value,
            'fields': [spec.to_dict() for spec in self.fields],
            'value_slots': [slot.to_dict() for slot in self.value_slots],
            'statement_slots': list(self.statement_slots),
        }


class BlockRegistry:
    """Map from kind name to ``BlockKind``."""

    def __init__(self):
        self._kinds: Dict[str, BlockKind] = {}
        self._lock = threading.RLock()

    def register(self, kind: BlockKind) -> BlockKind:
        with self._lock:
            if kind.name in self._kinds:
                raise ValueError(f"Block kind already registered: {kind.name}")
            self._kinds[kind.name] = kind
        return kind

    def block_kind(self, name: str, *, category: str = "misc",
                   fields: Sequence[FieldSpec] = (),
                   value_slots: Sequence[ValueSlot] = (),
                   statement_slots: Sequence[str] = (),
                   produces_value: bool = False,
                   description: str = "") -> Callable[[Generator], Generator]:
        """Decorator registering the decorated function as the generator of ``name``."""
        def decorator(generator: Generator) -> Generator:
            self.register(BlockKind(
                name=name,
                generator=generator,
                category=category,
                fields=tuple(fields),
                value_slots=tuple(value_slots),
                statement_slots=tuple(statement_slots),
                produces_value=produces_value,
                description=description or (generator.__doc__ or "").strip(),
            ))
            return generator
        return decorator

    def alias(self, name: str, target: str, description: str = "") -> BlockKind:
        """Register ``name`` as another kind sharing ``target``'s shape and generator."""
        original = self.get(target)
        if original is None:
            raise KeyError(f"Unknown block kind: {target}")
        return self.register(BlockKind(
            name=name,
            generator=original.generator,
            category=original.category,
            fields=original.fields,
            value_slots=original.value_slots,
            statement_slots=original.statement_slots,
            produces_value=original.produces_value,
            description=description or original.description,
        ))

    def get(self, name: str) -> Optional[BlockKind]:
        return self._kinds.get(name)

    def kinds(self, category: Optional[str] = None) -> List[BlockKind]:
        return [kind for kind in self._kinds.values()
                if category is None or kind.category == category]

    def categories(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for kind in self._kinds.values():
            grouped.setdefault(kind.category, []).append(kind.name)
        return grouped

    def create_block(self, name: str, **field_values: Any) -> Block:
        kind = self.get(name)
        if kind is None:
            raise KeyError(f"Unknown block kind: {name}")
        return kind.create_block(**field_values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_kinds': len(self._kinds),
            'categories': {
                category: [self._kinds[name].to_dict() for name in names]
                for category, names in self.categories().items()
            },
        }

    def __contains__(self, name: object) -> bool:
        return name in self._kinds

    def __iter__(self) -> Iterator[BlockKind]:
        return iter(list(self._kinds.values()))

    def __len__(self) -> int:
        return len(self._kinds)


# Process-wide registry populated by the built-in block modules
default_registry = BlockRegistry()
block_kind = default_registry.block_kind


def get_default_registry() -> BlockRegistry:
    """Return the default registry with every built-in block kind loaded."""
    # Import here to avoid circular imports
    from . import (  # noqa: F401
        value_blocks, object_blocks, motion_blocks,
        control_blocks, scene_blocks, standard_blocks,
    )
    return default_registry
