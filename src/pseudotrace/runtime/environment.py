"""
Symbol Table

One flat scope for the whole program: loop and conditional bodies share it,
so a loop counter stays visible after its loop. Created fresh for every
trace and discarded afterwards; this is the only mutable execution state.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List

from ..shared.errors import UndeclaredVariable
from ..shared.types import ValueType
from .values import RuntimeValue


@dataclass
class SymbolEntry:
    name: str
    type: ValueType
    value: RuntimeValue


class SymbolTable:
    """
    Name -> (type, value) mapping.
    - declare(name, type, value): insert, or overwrite in place
    - get(name): current entry, UndeclaredVariable if absent
    """
    _entries: Dict[str, SymbolEntry]

    def __init__(self):
        self._entries = {}

    def declare(self, name: str, type: ValueType, value: RuntimeValue) -> SymbolEntry:
        entry = self._entries.get(name)
        if entry is None:
            entry = SymbolEntry(name, type, value)
            self._entries[name] = entry
        else:
            entry.type = type
            entry.value = value
        return entry

    def get(self, name: str) -> SymbolEntry:
        entry = self._entries.get(name)
        if entry is None:
            raise UndeclaredVariable(name)
        return entry

    def has(self, name: str) -> bool:
        return name in self._entries

    def names(self) -> List[str]:
        """Declared names in declaration order."""
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[SymbolEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
