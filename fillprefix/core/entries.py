"""
Entries — Pattern table data model

A pattern table is an ordered tuple of PatternEntry values. The host engine
walks it front to back when deciding what a line prefix is, so order matters:
the beginning-of-line sentinel stays first, new entries only ever go last.

Table changes are plain command objects, not closures:
- TableChange: one requested mutation (add / remove exact / remove by tag)
- DeferredMutation: a TableChange plus the scope it was resolved to,
  waiting in a pending queue for the host engine to come up

Both serialize to dicts so queued work can be inspected.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

import xxhash

from .scope import TableScope, scope_from_string


@dataclass(frozen=True)
class PatternEntry:
    """
    One (matcher, classification) pair.

    The matcher is opaque here: it is whatever recognition rule the host
    engine understands (typically a regular expression). Two entries are the
    same entry when both fields are equal.
    """
    matcher: str
    classification: str

    @property
    def entry_id(self) -> str:
        """Short deterministic id for display."""
        content = f"{self.classification}\x00{self.matcher}"
        return xxhash.xxh32(content.encode()).hexdigest()

    def to_dict(self) -> Dict[str, str]:
        return {"matcher": self.matcher, "classification": self.classification}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PatternEntry':
        matcher = data.get("matcher")
        classification = data.get("classification")
        if not isinstance(matcher, str) or not isinstance(classification, str):
            raise ValueError(f"Malformed pattern entry: {data!r}")
        return cls(matcher=matcher, classification=classification)

    @classmethod
    def coerce(cls, value: Union['PatternEntry', Tuple[str, str]]) -> 'PatternEntry':
        """Accept an entry or a (matcher, classification) pair."""
        if isinstance(value, PatternEntry):
            return value
        if isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, str) for v in value):
            return cls(matcher=value[0], classification=value[1])
        raise TypeError(f"Expected PatternEntry or (matcher, classification), got {value!r}")

    def __str__(self) -> str:
        return f"({self.matcher!r}, {self.classification})"


PatternTable = Tuple[PatternEntry, ...]


def make_table(*pairs: Tuple[str, str]) -> PatternTable:
    """Build a table from (matcher, classification) pairs."""
    return tuple(PatternEntry(matcher, classification) for matcher, classification in pairs)


class ChangeOp(Enum):
    ADD = "add"
    REMOVE_EXACT = "remove_exact"
    REMOVE_BY_CLASSIFICATION = "remove_by_classification"


@dataclass(frozen=True)
class TableChange:
    """
    A single requested table mutation.

    ADD and REMOVE_EXACT carry an entry; REMOVE_BY_CLASSIFICATION carries
    only the classification tag.
    """
    op: ChangeOp
    entry: Optional[PatternEntry] = None
    classification: Optional[str] = None

    def __post_init__(self):
        if self.op == ChangeOp.REMOVE_BY_CLASSIFICATION:
            if not isinstance(self.classification, str):
                raise ValueError(f"{self.op.value} needs a classification tag")
        elif not isinstance(self.entry, PatternEntry):
            raise ValueError(f"{self.op.value} needs a pattern entry")

    @classmethod
    def add(cls, entry: PatternEntry) -> 'TableChange':
        return cls(op=ChangeOp.ADD, entry=PatternEntry.coerce(entry))

    @classmethod
    def remove_exact(cls, entry: PatternEntry) -> 'TableChange':
        return cls(op=ChangeOp.REMOVE_EXACT, entry=PatternEntry.coerce(entry))

    @classmethod
    def remove_by_classification(cls, classification: str) -> 'TableChange':
        return cls(op=ChangeOp.REMOVE_BY_CLASSIFICATION, classification=classification)

    def describe(self) -> str:
        """Human-readable one-liner (used in logs and CLI output)."""
        if self.op == ChangeOp.REMOVE_BY_CLASSIFICATION:
            return f"remove all {self.classification}"
        verb = "add" if self.op == ChangeOp.ADD else "remove"
        return f"{verb} {self.entry}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "op": self.op.value,
            "entry": self.entry.to_dict() if self.entry else None,
            "classification": self.classification,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TableChange':
        op = ChangeOp(data["op"])
        entry_data = data.get("entry")
        return cls(
            op=op,
            entry=PatternEntry.from_dict(entry_data) if entry_data else None,
            classification=data.get("classification"),
        )


@dataclass(frozen=True)
class DeferredMutation:
    """
    A change queued until the host engine is available.

    Self-contained: replaying it needs nothing but the table it lands on.
    context_id is None for globally scoped mutations.
    """
    change: TableChange
    scope: TableScope
    context_id: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.scope == TableScope.GLOBAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "change": self.change.to_dict(),
            "scope": self.scope.value,
            "context_id": self.context_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeferredMutation':
        return cls(
            change=TableChange.from_dict(data["change"]),
            scope=scope_from_string(data.get("scope")),
            context_id=data.get("context_id"),
        )
