# Use-after-free detection: basic heuristic detection of freed pointer usage

from __future__ import annotations

from typing import Any, Mapping, NamedTuple, Optional

from tree_sitter import Node as TSNode

from clint.context import AnalysisContext, get_source_span
from clint.findings.ledger import IssueLedger
from clint.findings.models import Severity
from clint.rules.base import Rule, walk
from clint.rules.unsafe_functions import called_function_name

NULL_LITERALS = ("NULL", "0", "0L", "0LL")


class _Event(NamedTuple):
    position: int
    kind: str  # "free" or "ident"
    name: str
    node: TSNode
    function: Optional[TSNode]


def _pointer_identifier(context: AnalysisContext, node: TSNode) -> str | None:
    """
    From a free() argument node, extract the root identifier name.
    Handles: p, *p, (p), (void*)p, p->next, etc.
    """
    if node.type == "identifier":
        return get_source_span(context, node).strip()
    for child in node.children:
        name = _pointer_identifier(context, child)
        if name:
            return name
    return None


def _enclosing_function(node: TSNode) -> TSNode | None:
    n = node
    while n:
        if n.type == "function_definition":
            return n
        n = n.parent
    return None


def _is_null_assignment(context: AnalysisContext, ident_node: TSNode) -> bool:
    """True if the identifier is the left-hand side of `p = NULL` or `p = 0`."""
    parent = ident_node.parent
    if parent is None or parent.type != "assignment_expression":
        return False
    lhs = parent.child_by_field_name("left")
    rhs = parent.child_by_field_name("right")
    if lhs is None or rhs is None:
        return False
    if not lhs.start_byte <= ident_node.start_byte < lhs.end_byte:
        return False
    return rhs.type == "null" or get_source_span(context, rhs).strip().upper() in NULL_LITERALS


def _collect_events(context: AnalysisContext) -> list[_Event]:
    events: list[_Event] = []
    for node in walk(context.root_node):
        if node.type == "call_expression":
            if called_function_name(context, node) != "free":
                continue
            args = node.child_by_field_name("arguments")
            if args is None or not args.named_children:
                continue
            ptr_name = _pointer_identifier(context, args.named_children[0])
            if ptr_name:
                events.append(
                    _Event(node.end_byte, "free", ptr_name, node, _enclosing_function(node))
                )
        elif node.type == "identifier":
            name = get_source_span(context, node).strip()
            if name and name != "free":
                events.append(
                    _Event(node.start_byte, "ident", name, node, _enclosing_function(node))
                )
    return events


def find_uses_after_free(context: AnalysisContext) -> list[tuple[TSNode, str]]:
    """
    Identifier nodes used after a free() of the same name in the same function.
    The `p = NULL` idiom after free() is not a use.
    """
    events = _collect_events(context)
    uses: list[tuple[TSNode, str]] = []
    for i, event in enumerate(events):
        if event.kind != "ident" or _is_null_assignment(context, event.node):
            continue
        for earlier in events[:i]:
            if earlier.kind != "free" or earlier.name != event.name:
                continue
            if event.position <= earlier.position:
                continue
            if event.function is not None and earlier.function is not None:
                if event.function != earlier.function:
                    continue
            uses.append((event.node, event.name))
            break
    return uses


class UseAfterFreeRule(Rule):
    """Flags use of an identifier after a free() of the same name in the same function."""

    id = "use-after-free"
    name = "Use after free"
    category = "memory"
    severity = Severity.CRITICAL
    description = "A pointer is read or written after it was passed to free()."

    def inspect(
        self,
        context: AnalysisContext,
        ledger: IssueLedger,
        configurations: Optional[Mapping[str, Any]] = None,
    ) -> None:
        for ident_node, ptr_name in find_uses_after_free(context):
            self.record_issue(
                ledger,
                context,
                ident_node,
                f"Possible use-after-free: '{ptr_name}' may be used after free().",
            )
