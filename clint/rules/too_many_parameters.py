# Parameter count check: flags function definitions with long parameter lists

from __future__ import annotations

from typing import Any, Mapping, Optional

from tree_sitter import Node as TSNode

from clint.context import AnalysisContext, get_source_span
from clint.findings.ledger import IssueLedger
from clint.findings.models import Severity
from clint.rules.base import Rule, walk

DEFAULT_MAX_PARAMETERS = 10


def _parameter_list(function_node: TSNode) -> TSNode | None:
    """The parameter_list of a function_definition, looking through pointer declarators."""
    declarator = function_node.child_by_field_name("declarator")
    while declarator is not None and declarator.type != "function_declarator":
        declarator = declarator.child_by_field_name("declarator")
    if declarator is None:
        return None
    return declarator.child_by_field_name("parameters")


def count_parameters(context: AnalysisContext, function_node: TSNode) -> int:
    """Number of declared parameters; `(void)` counts as zero."""
    params = _parameter_list(function_node)
    if params is None:
        return 0
    declarations = [
        c for c in params.named_children
        if c.type in ("parameter_declaration", "variadic_parameter")
    ]
    if len(declarations) == 1 and get_source_span(context, declarations[0]).strip() == "void":
        return 0
    return len(declarations)


class TooManyParametersRule(Rule):
    id = "too-many-parameters"
    name = "Too many parameters"
    category = "size"
    severity = Severity.MINOR
    description = (
        "Function definitions whose parameter count exceeds 'max_parameters' "
        f"(default {DEFAULT_MAX_PARAMETERS})."
    )

    def inspect(
        self,
        context: AnalysisContext,
        ledger: IssueLedger,
        configurations: Optional[Mapping[str, Any]] = None,
    ) -> None:
        limit = self.int_option(configurations, "max_parameters", DEFAULT_MAX_PARAMETERS)
        for node in walk(context.root_node):
            if node.type != "function_definition":
                continue
            count = count_parameters(context, node)
            if count > limit:
                self.record_issue(
                    ledger,
                    context,
                    node,
                    f"Function has {count} parameters, exceeding the limit of {limit}.",
                )
