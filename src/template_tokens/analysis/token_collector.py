"""
Template tokens collector.

Walks a Template tree in document order and records every component,
helper and modifier invocation it references, skipping `@arguments`,
block-bound locals and plain HTML tags.

The walk is iterative: an explicit stack of (node, scope) work items
replaces recursion, so nesting depth is bounded by memory rather than by
the interpreter's recursion limit. Each work item carries the scope that
is visible at that node; entering a body with block parameters hands its
children a pushed scope, and leaving it needs no undo.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from ..shared.nodes import (
    ASTNode, AttrNode, Block, BlockStatement, ConcatStatement, ElementNode, Hash, HashPair,
    NodeType, PathExpression, Template,
)
from ..shared.scope import EMPTY_SCOPE, Scope
from ..shared.source_location import SourceLocation
from .path_classifier import ClassificationKind, PathContext, classify

logger = logging.getLogger("template_tokens.analysis.token_collector")

WorkItem = Tuple[Any, Scope]

# Attributes an unrecognized node may expose its children under, in visiting order
_FALLBACK_CHILD_FIELDS = ("params", "parts", "children", "body")


@dataclass(frozen=True)
class TokenUsage:
    """One invocation found in a template."""
    token: str
    kind: ClassificationKind
    site: NodeType
    location: Optional[SourceLocation] = None


class TemplateTokensCollector:
    """
    Collects TokenUsages from a template tree.

    Dispatch is a table keyed by NodeType. Each visit method records the
    node's own usage (if any) and returns the node's children, in document
    order, paired with the scope they are evaluated in.

    Stateless between calls; one instance may be shared across threads.
    """

    def __init__(self) -> None:
        self._visitors: Dict[NodeType, Callable[[Any, Scope, List[TokenUsage]], List[WorkItem]]] = {
            NodeType.TEMPLATE: self._visit_template,
            NodeType.ELEMENT: self._visit_element,
            NodeType.ATTRIBUTE: self._visit_attribute,
            NodeType.CONCAT: self._visit_concat,
            NodeType.MUSTACHE: self._visit_invocation,
            NodeType.SUB_EXPRESSION: self._visit_invocation,
            NodeType.ELEMENT_MODIFIER: self._visit_invocation,
            NodeType.BLOCK: self._visit_block,
            NodeType.BLOCK_BODY: self._visit_block_body,
            NodeType.HASH: self._visit_hash,
            NodeType.HASH_PAIR: self._visit_hash_pair,
            NodeType.TEXT: self._visit_leaf,
            NodeType.COMMENT: self._visit_leaf,
            NodeType.MUSTACHE_COMMENT: self._visit_leaf,
            NodeType.PATH: self._visit_leaf,
            NodeType.STRING_LITERAL: self._visit_leaf,
            NodeType.NUMBER_LITERAL: self._visit_leaf,
            NodeType.BOOLEAN_LITERAL: self._visit_leaf,
            NodeType.NULL_LITERAL: self._visit_leaf,
            NodeType.UNDEFINED_LITERAL: self._visit_leaf,
        }

    def collect(self, root: ASTNode, scope: Scope = EMPTY_SCOPE) -> List[TokenUsage]:
        """All usages under root, in document order."""
        usages: List[TokenUsage] = []
        stack: List[WorkItem] = [(root, scope)]
        while stack:
            node, node_scope = stack.pop()
            visit = self._visitors.get(getattr(node, "node_type", None), self._visit_unknown)
            children = visit(node, node_scope, usages)
            stack.extend(reversed(children))
        logger.debug(f"Collected {len(usages)} token usages")
        return usages

    def tokens(self, root: ASTNode) -> List[str]:
        return [usage.token for usage in self.collect(root)]

    # =========================================================================
    # Usage recording
    # =========================================================================

    @staticmethod
    def _record(usages: List[TokenUsage], raw_path: str, context: PathContext,
                scope: Scope, site: NodeType, location: Optional[SourceLocation]) -> None:
        result = classify(raw_path, context, scope)
        if not result.is_skip:
            usages.append(TokenUsage(result.path, result.kind, site, location))

    # =========================================================================
    # Visitors
    # =========================================================================

    def _visit_leaf(self, node: ASTNode, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        return []

    def _visit_template(self, node: Template, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        return [(statement, scope) for statement in node.body]

    def _visit_element(self, node: ElementNode, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        self._record(usages, node.tag, PathContext.TAG_NAME, scope, node.node_type, node.location)
        # attributes and modifiers are evaluated before the element's own block params exist
        items: List[WorkItem] = [(attribute, scope) for attribute in node.attributes]
        items.extend((modifier, scope) for modifier in node.modifiers)
        inner = scope.push(node.block_params)
        items.extend((child, inner) for child in node.children)
        return items

    def _visit_attribute(self, node: AttrNode, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        return [(node.value, scope)]

    def _visit_concat(self, node: ConcatStatement, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        return [(part, scope) for part in node.parts]

    def _visit_invocation(self, node: Any, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        """MustacheStatement, SubExpression and ElementModifierStatement"""
        items: List[WorkItem] = []
        if isinstance(node.path, PathExpression):
            self._record(usages, node.path.original, PathContext.CURLY_PATH, scope,
                         node.node_type, node.location)
        else:
            items.append((node.path, scope))
        items.extend((param, scope) for param in node.params)
        items.append((node.hash, scope))
        return items

    def _visit_block(self, node: BlockStatement, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        # one node for both delimiters, so at most one usage per block
        items = self._visit_invocation(node, scope, usages)
        items.append((node.program, scope))
        if node.inverse is not None:
            items.append((node.inverse, scope))
        return items

    def _visit_block_body(self, node: Block, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        inner = scope.push(node.block_params)
        return [(statement, inner) for statement in node.body]

    def _visit_hash(self, node: Hash, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        return [(pair, scope) for pair in node.pairs]

    def _visit_hash_pair(self, node: HashPair, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        return [(node.value, scope)]

    def _visit_unknown(self, node: Any, scope: Scope, usages: List[TokenUsage]) -> List[WorkItem]:
        """Unrecognized node kinds yield no usage; any child lists they expose are still walked."""
        logger.debug(f"No visitor for {type(node).__name__}; walking exposed children")
        items: List[WorkItem] = []
        for field_name in _FALLBACK_CHILD_FIELDS:
            value = getattr(node, field_name, None)
            if isinstance(value, (list, tuple)):
                items.extend((child, scope) for child in value)
        return items
