"""Block reconciliation: combine a document's existing blocks with new ones under a policy

The store can delete single blocks and append a batch at the tail, but cannot
insert at a position. Merging therefore deletes every existing block and
re-submits it in the desired order around the new content.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from mdblocks.core.models import Block


class Policy(str, Enum):
    replace = "replace"
    append = "append"
    merge = "merge"


class Position(str, Enum):
    start = "start"
    end = "end"


@dataclass(frozen=True)
class Plan:
    """Blocks to delete from the store, then blocks to append in order."""
    to_delete: list[Block] = field(default_factory=list)
    to_append: list[Block] = field(default_factory=list)

    @property
    def is_destructive(self) -> bool:
        return bool(self.to_delete)


def reconcile(
    existing: Sequence[Block],
    new: Sequence[Block],
    policy: Policy | str = Policy.replace,
    position: Optional[Position | str] = Position.end,
    ) -> Plan:
    """Compute the delete set and the append sequence for an update.

    position is only read for the merge policy, where None means end. Raises
    ValueError for an unknown policy, or an unknown position when merging.
    """
    policy = Policy(policy)
    existing, new = list(existing), list(new)

    if policy == Policy.append:
        return Plan(to_delete=[], to_append=new)
    if policy == Policy.replace:
        return Plan(to_delete=existing, to_append=new)
    if Position(position or Position.end) == Position.start:
        return Plan(to_delete=existing, to_append=new + existing)
    return Plan(to_delete=existing, to_append=existing + new)
