"""
Path classification.

Decides whether a path written in a template names a global invocable
(component, helper or modifier) and, if so, the normalized token it
contributes. Anything else (arguments, block-bound locals, plain HTML
tags) is skipped.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..shared.scope import EMPTY_SCOPE, Scope
from ..utils.config import (
    ANGLE_SEGMENT_SEPARATOR, ARGUMENT_PREFIX, CURLY_SEGMENT_SEPARATORS,
    NAMED_BLOCK_PREFIX, TOKEN_SEGMENT_SEPARATOR, WORD_SEPARATOR,
)

_CURLY_HEAD = re.compile("[" + re.escape("".join(CURLY_SEGMENT_SEPARATORS)) + "]")
_INNER_UPPER = re.compile(r"(?<!^)([A-Z])")
_WORD = re.compile(r"[^-]+")


class PathContext(Enum):
    """Syntactic position a path was written in"""
    TAG_NAME = "tag_name"      # <Foo::Bar>
    CURLY_PATH = "curly_path"  # {{foo}}, {{#foo}}, (foo), <div {{foo}}>


class ClassificationKind(Enum):
    SKIP = "skip"
    COMPONENT = "component"
    INVOCABLE = "invocable"


@dataclass(frozen=True)
class Classification:
    kind: ClassificationKind
    path: Optional[str] = None

    @classmethod
    def component(cls, path: str) -> "Classification":
        return cls(ClassificationKind.COMPONENT, path)

    @classmethod
    def invocable(cls, path: str) -> "Classification":
        return cls(ClassificationKind.INVOCABLE, path)

    @property
    def is_skip(self) -> bool:
        return self.kind is ClassificationKind.SKIP


SKIP = Classification(ClassificationKind.SKIP)


def dasherize(segment: str) -> str:
    """`MyComponent` -> `my-component`: hyphen before every non-leading capital, then lowercase."""
    return _INNER_UPPER.sub(WORD_SEPARATOR + r"\1", segment).lower()


def normalize_tag_name(tag: str) -> str:
    """`Foo::BarBaz` -> `foo/bar-baz`"""
    return TOKEN_SEGMENT_SEPARATOR.join(
        dasherize(segment) for segment in tag.split(ANGLE_SEGMENT_SEPARATOR)
    )


def to_angle_bracket_name(token: str) -> str:
    """`foo/bar-baz` -> `Foo::BarBaz`, for showing a component token as a tag."""
    return ANGLE_SEGMENT_SEPARATOR.join(
        _WORD.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:], segment).replace(WORD_SEPARATOR, "")
        for segment in token.split(TOKEN_SEGMENT_SEPARATOR)
    )


def head_segment(raw_path: str, context: PathContext) -> str:
    """
    First segment of a path: the name a block parameter would bind.

    Tag names are split on `::` first; both contexts then stop at the first
    `.` or `/`, so `<item.Title>` and `{{item.title}}` share the head `item`.
    """
    head = raw_path
    if context is PathContext.TAG_NAME:
        head = head.split(ANGLE_SEGMENT_SEPARATOR, 1)[0]
    return _CURLY_HEAD.split(head, 1)[0]


def classify(raw_path: str, context: PathContext, scope: Scope = EMPTY_SCOPE) -> Classification:
    """Classify one path seen at a candidate site. Rules apply in order."""
    if not raw_path or raw_path.startswith(ARGUMENT_PREFIX):
        return SKIP
    if scope.is_bound(head_segment(raw_path, context)):
        return SKIP
    if context is PathContext.TAG_NAME:
        if raw_path[0].islower() or raw_path.startswith(NAMED_BLOCK_PREFIX):
            return SKIP
        return Classification.component(normalize_tag_name(raw_path))
    return Classification.invocable(raw_path)
