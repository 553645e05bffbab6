"""
Symbol tables and resolution services.

Two tables outlive a single compile call:

    VariableTable     opaque variable id -> current display name. Mutated by the
                      editing surface when the user creates or renames a variable.
    ConstantRegistry  append-only list of user-defined named literals. Created empty
                      when the application starts, grows only through the
                      "define new constant" flow, and is never persisted: a fresh
                      load starts with an empty registry again.

The compiler never writes to either table. At the start of each compile it takes a
snapshot of both and hands generators the read-only ``VariableResolver`` and
``ConstantResolver`` services built from those snapshots.
"""

import keyword
import logging
import threading
import uuid
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .formatting import format_number


logger = logging.getLogger(__name__)


# =============================================================================
# BUILT-IN PHYSICS CONSTANTS
# =============================================================================

@dataclass(frozen=True)
class PhysicsConstant:
    """A built-in constant offered by the physics constant dropdown."""
    symbol: str
    literal: str
    description: str
    unit: str = ""


PHYSICS_CONSTANTS: Dict[str, PhysicsConstant] = {
    'g':   PhysicsConstant('g', '9.81', 'standard gravity', 'm/s²'),
    'G':   PhysicsConstant('G', '6.674e-11', 'gravitational constant', 'N·m²/kg²'),
    'pi':  PhysicsConstant('π', 'pi', 'pi (provided by the runtime)'),
    'e':   PhysicsConstant('e', '2.71828', "Euler's number"),
    'c':   PhysicsConstant('c', '3e8', 'speed of light', 'm/s'),
    'k_e': PhysicsConstant('kₑ', '8.988e9', "Coulomb's constant", 'N·m²/C²'),
    'h':   PhysicsConstant('h', '6.626e-34', "Planck's constant", 'J·s'),
    'm_e': PhysicsConstant('mₑ', '9.109e-31', 'electron mass', 'kg'),
    'm_p': PhysicsConstant('mₚ', '1.673e-27', 'proton mass', 'kg'),
}

# Dropdown labels the editor may store instead of the short key
CONSTANT_ALIASES: Dict[str, str] = {
    'π': 'pi',
    'PI': 'pi',
    'kₑ': 'k_e',
    'ke': 'k_e',
    'mₑ': 'm_e',
    'me': 'm_e',
    'mₚ': 'm_p',
    'mp': 'm_p',
}

UNRESOLVED_CONSTANT = '0'


# =============================================================================
# VARIABLE TABLE
# =============================================================================

class VariableTable:
    """Process-scoped mapping from opaque variable id to current display name.

    Names are not deduplicated: two ids renamed to the same text both resolve to it.
    """

    def __init__(self, variables: Optional[Mapping[str, str]] = None):
        self._names: Dict[str, str] = dict(variables or {})
        self._lock = threading.RLock()

    def create(self, name: str, var_id: Optional[str] = None) -> str:
        """Add a variable and return its id."""
        with self._lock:
            var_id = var_id or str(uuid.uuid4())
            self._names[var_id] = name
            return var_id

    def ensure(self, name: str) -> str:
        """Return the id of the first variable named ``name``, creating it if needed."""
        with self._lock:
            for var_id, existing in self._names.items():
                if existing == name:
                    return var_id
            return self.create(name)

    def rename(self, var_id: str, new_name: str) -> None:
        with self._lock:
            if var_id not in self._names:
                raise KeyError(f"Unknown variable id: {var_id}")
            old_name = self._names[var_id]
            self._names[var_id] = new_name
        logger.info(f"Renamed variable {var_id}: {old_name!r} -> {new_name!r}")

    def delete(self, var_id: str) -> bool:
        with self._lock:
            return self._names.pop(var_id, None) is not None

    def get_name(self, var_id: str) -> Optional[str]:
        return self._names.get(var_id)

    def items(self) -> List[Tuple[str, str]]:
        with self._lock:
            return list(self._names.items())

    def snapshot(self) -> Mapping[str, str]:
        """Read-only copy of the table as it is right now."""
        with self._lock:
            return MappingProxyType(dict(self._names))

    def __contains__(self, var_id: object) -> bool:
        return var_id in self._names

    def __len__(self) -> int:
        return len(self._names)


# =============================================================================
# CUSTOM CONSTANT REGISTRY
# =============================================================================

@dataclass(frozen=True)
class CustomConstant:
    """A user-defined named literal."""
    name: str
    literal_value: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'value': self.literal_value}


class ConstantRegistry:
    """Append-only, session-scoped registry of user-defined constants."""

    def __init__(self, constants: Optional[List[CustomConstant]] = None):
        self._constants: List[CustomConstant] = list(constants or [])
        self._lock = threading.RLock()

    def define(self, name: str, literal_value: Any) -> CustomConstant:
        """Append a new constant.

        Raises:
            ValueError: ``name`` is not a usable identifier, shadows a built-in
                constant, or is already defined.
        """
        name = (name or '').strip()
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ValueError(f"Invalid constant name: {name!r}")
        if name in PHYSICS_CONSTANTS or name in CONSTANT_ALIASES:
            raise ValueError(f"'{name}' is a built-in physics constant")

        if isinstance(literal_value, (int, float)) and not isinstance(literal_value, bool):
            literal = format_number(literal_value)
        else:
            literal = str(literal_value).strip()
        if not literal:
            raise ValueError(f"Constant '{name}' needs a value")

        with self._lock:
            if self.lookup(name) is not None:
                raise ValueError(f"Constant '{name}' is already defined")
            constant = CustomConstant(name, literal)
            self._constants.append(constant)

        logger.info(f"Defined custom constant {name} = {literal}")
        return constant

    def lookup(self, name: str) -> Optional[CustomConstant]:
        for constant in self._constants:
            if constant.name == name:
                return constant
        return None

    def names(self) -> List[str]:
        return [constant.name for constant in self._constants]

    def snapshot(self) -> Tuple[CustomConstant, ...]:
        with self._lock:
            return tuple(self._constants)

    def to_list(self) -> List[Dict[str, str]]:
        return [constant.to_dict() for constant in self.snapshot()]

    def __contains__(self, name: object) -> bool:
        return any(constant.name == name for constant in self._constants)

    def __iter__(self) -> Iterator[CustomConstant]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._constants)


# =============================================================================
# RESOLVERS
# =============================================================================

class VariableResolver:
    """Resolves a field value to the symbol's current display name."""

    def __init__(self, names: Mapping[str, str]):
        self._names = names

    @classmethod
    def from_table(cls, table: VariableTable) -> 'VariableResolver':
        return cls(table.snapshot())

    def resolve(self, field_value: Any, fallback: str) -> str:
        """Return a non-empty identifier for ``field_value``.

        A reference recognised in the table yields its current name. Anything else
        (an id that is no longer in the table, or a field holding free text) yields
        the raw text when it is non-empty, else ``fallback``.
        """
        # Imported here to avoid circular imports
        from .models import VariableRef

        if isinstance(field_value, VariableRef):
            name = self._names.get(field_value.id)
            if name and name.strip():
                return name.strip()
            raw = field_value.name
        elif isinstance(field_value, str) and field_value in self._names:
            name = self._names[field_value]
            raw = name if name.strip() else ''
        elif field_value is None:
            raw = ''
        else:
            raw = str(field_value)

        return raw.strip() or fallback


class ConstantResolver:
    """Resolves a physics or custom constant key to target text."""

    def __init__(self, custom: Tuple[CustomConstant, ...] = ()):
        self._custom = custom

    @classmethod
    def from_registry(cls, registry: ConstantRegistry) -> 'ConstantResolver':
        return cls(registry.snapshot())

    def resolve(self, key: Any) -> str:
        """Return the literal for a built-in, the bare name for a custom constant, else ``0``.

        A custom constant's value is emitted once, at its definition site, so later
        references are by name.
        """
        key = str(key or '').strip()
        key = CONSTANT_ALIASES.get(key, key)

        builtin = PHYSICS_CONSTANTS.get(key)
        if builtin is not None:
            return builtin.literal

        for constant in self._custom:
            if constant.name == key:
                return constant.name

        if key:
            logger.debug(f"Unresolved constant {key!r}, emitting {UNRESOLVED_CONSTANT}")
        return UNRESOLVED_CONSTANT

    def literal_for(self, name: str) -> Optional[str]:
        """Return the literal value a custom constant was defined with."""
        for constant in self._custom:
            if constant.name == name:
                return constant.literal_value
        return None
