# Unsafe function usage detection: detects calls to dangerous standard library functions

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from tree_sitter import Node as TSNode

from clint.context import AnalysisContext, get_source_span
from clint.findings.ledger import IssueLedger
from clint.findings.models import Severity
from clint.rules.base import Rule, walk

# Classic C functions that are always unsafe (no bounds checking)
ALWAYS_UNSAFE = frozenset(
    {
        "gets",  # no bounds; removed in C11
        "strcpy",
        "strcat",
        "sprintf",
        "vsprintf",
        "getwd",
        "tmpnam",  # race / buffer issues
    }
)

# scanf/sscanf: unsafe only when format has unbounded %s or %[...]
SCANF_LIKE = frozenset({"scanf", "sscanf"})

_SCANF_CONVERSION = re.compile(r"%(?:\*?)((?:\d+)?)(?:hh|h|ll|l|j|z|t|L)?([s\[])")


def _scanf_format_has_unbounded_string(fmt: str) -> bool:
    """True if format contains %s or %[ without width (e.g. %15s is safe)."""
    return any(m.group(1) == "" for m in _SCANF_CONVERSION.finditer(fmt.replace("%%", "")))


def _unquote_c_string(raw: str) -> str | None:
    raw = raw.strip()
    if len(raw) < 2 or raw[0] != '"' or raw[-1] != '"':
        return None
    return raw[1:-1]


def called_function_name(context: AnalysisContext, call_node: TSNode) -> str | None:
    """
    Return the bare function name for a call_expression, or None.
    Handles identifier (e.g. gets) and field_expression (e.g. obj.fn).
    """
    if call_node.type != "call_expression":
        return None
    func_node = call_node.child_by_field_name("function")
    if func_node is None:
        return None
    if func_node.type == "field_expression":
        field = func_node.child_by_field_name("field")
        return get_source_span(context, field).strip() if field else None
    return get_source_span(context, func_node).strip()


def _is_bounded_scanf(context: AnalysisContext, name: str, call_node: TSNode) -> bool:
    args = call_node.child_by_field_name("arguments")
    named = [c for c in args.named_children] if args else []
    fmt_idx = 1 if name == "sscanf" else 0
    if fmt_idx >= len(named) or named[fmt_idx].type != "string_literal":
        return False
    fmt = _unquote_c_string(get_source_span(context, named[fmt_idx]))
    return fmt is not None and not _scanf_format_has_unbounded_string(fmt)


class UnsafeFunctionsRule(Rule):
    """Detects calls to dangerous C standard library functions (e.g. gets, strcpy)."""

    id = "unsafe-functions"
    name = "Unsafe function usage"
    category = "security"
    severity = Severity.MAJOR
    description = (
        "Calls to C library functions without bounds checking. "
        "Option 'allow' lists function names that should not be reported."
    )

    def inspect(
        self,
        context: AnalysisContext,
        ledger: IssueLedger,
        configurations: Optional[Mapping[str, Any]] = None,
    ) -> None:
        allowed = frozenset(self.options(configurations).get("allow", ()))
        for node in walk(context.root_node):
            if node.type != "call_expression":
                continue
            name = called_function_name(context, node)
            if not name or name in allowed:
                continue
            if name in ALWAYS_UNSAFE or (
                name in SCANF_LIKE and not _is_bounded_scanf(context, name, node)
            ):
                self.record_issue(
                    ledger,
                    context,
                    node,
                    f"Unsafe function '{name}' may lead to buffer overflow or undefined "
                    "behavior; use a safe alternative.",
                )
