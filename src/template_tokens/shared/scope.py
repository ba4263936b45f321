"""
Block-parameter scope.

A scope is a stack of frames; each frame is the set of names bound by one
`as |a b|` declaration. Scopes are immutable values: push() and pop() return
new scopes, so a traversal can hand each work item its own snapshot and
never has to undo anything on the way out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Tuple

from .errors import ScopeUnderflowError


ScopeFrame = FrozenSet[str]


@dataclass(frozen=True)
class Scope:
    """
    Ordered chain of block-parameter frames, innermost last.

    Lookup is exact and case-sensitive: `Bar` bound by `as |Bar|` does not
    shadow `bar`.
    """

    frames: Tuple[ScopeFrame, ...] = ()

    def push(self, names: Iterable[str]) -> Scope:
        """New scope with `names` as innermost frame (self when names is empty)."""
        frame = frozenset(names)
        if not frame:
            return self
        return Scope(self.frames + (frame,))

    def pop(self) -> Scope:
        """Scope without the innermost frame."""
        if not self.frames:
            raise ScopeUnderflowError()
        return Scope(self.frames[:-1])

    def is_bound(self, head: str) -> bool:
        """True if head is bound by any frame, innermost to outermost."""
        for frame in reversed(self.frames):
            if head in frame:
                return True
        return False

    @property
    def depth(self) -> int:
        return len(self.frames)

    def bound_names(self) -> FrozenSet[str]:
        """All names visible from this scope."""
        names: FrozenSet[str] = frozenset()
        for frame in self.frames:
            names = names | frame
        return names


EMPTY_SCOPE = Scope()
