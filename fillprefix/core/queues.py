"""
PendingQueues — Mutations waiting for the host engine

Two explicitly named queues:
- global_queue: replayed once against the shared default table
- per-context queues: each replayed once against that context's table

take_*() hands back the queued mutations in insertion order and clears
the queue in the same step, so a drained queue can never be replayed.
"""

from dataclasses import dataclass
from typing import Dict, List

import orjson

from .entries import DeferredMutation


@dataclass
class QueueStats:
    """Counters for observability."""
    total_enqueued: int = 0
    total_drained: int = 0
    total_discarded: int = 0

    def to_dict(self) -> dict:
        return {
            "total_enqueued": self.total_enqueued,
            "total_drained": self.total_drained,
            "total_discarded": self.total_discarded,
            "pending": self.total_enqueued - self.total_drained - self.total_discarded,
        }


class PendingQueues:
    """Global queue plus one queue per context."""

    def __init__(self):
        self.global_queue: List[DeferredMutation] = []
        self._local: Dict[str, List[DeferredMutation]] = {}
        self.stats = QueueStats()

    def enqueue(self, mutation: DeferredMutation) -> None:
        """
        Append a mutation to the queue matching its scope.

        Raises:
            ValueError: If a local mutation has no context id
        """
        if mutation.is_global:
            self.global_queue.append(mutation)
        else:
            if mutation.context_id is None:
                raise ValueError("Local mutation requires a context id")
            self._local.setdefault(mutation.context_id, []).append(mutation)
        self.stats.total_enqueued += 1

    def take_global(self) -> List[DeferredMutation]:
        """Return and clear the global queue."""
        taken, self.global_queue = self.global_queue, []
        self.stats.total_drained += len(taken)
        return taken

    def take_local(self, context_id: str) -> List[DeferredMutation]:
        """Return and clear one context's queue."""
        taken = self._local.pop(context_id, [])
        self.stats.total_drained += len(taken)
        return taken

    def discard(self, context_id: str) -> int:
        """Drop a context's queue without applying it. Returns count dropped."""
        dropped = self._local.pop(context_id, [])
        self.stats.total_discarded += len(dropped)
        return len(dropped)

    def has_local(self, context_id: str) -> bool:
        return bool(self._local.get(context_id))

    def pending_contexts(self) -> List[str]:
        """Context ids with queued local mutations, in first-queued order."""
        return [ctx for ctx, queue in self._local.items() if queue]

    def local_queue(self, context_id: str) -> List[DeferredMutation]:
        """Read-only copy of a context's queue."""
        return list(self._local.get(context_id, []))

    def global_count(self) -> int:
        return len(self.global_queue)

    def local_count(self, context_id: str) -> int:
        return len(self._local.get(context_id, []))

    def is_empty(self) -> bool:
        return not self.global_queue and not any(self._local.values())

    def __len__(self) -> int:
        return len(self.global_queue) + sum(len(q) for q in self._local.values())

    def snapshot(self) -> dict:
        return {
            "global": [m.to_dict() for m in self.global_queue],
            "local": {
                ctx: [m.to_dict() for m in queue]
                for ctx, queue in self._local.items() if queue
            },
            "stats": self.stats.to_dict(),
        }

    def to_json(self) -> str:
        return orjson.dumps(self.snapshot(), option=orjson.OPT_INDENT_2).decode()
