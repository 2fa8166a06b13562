"""Load case tables and compile them into per-code classifiers.

The packaged tables live in ``btcrpc_errors/data/cases.yaml``. Each table is
named after the RpcErrorCode it classifies and lists its cases in priority
order.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path

from btcrpc_errors.core.config import CaseConfig, CaseTableConfig, CaseTableSet
from btcrpc_errors.patterns import (
    CompiledClassifier,
    PatternSpec,
    compile_specs,
    template_arity,
    template_to_pattern,
)

from .codes import RpcErrorCode

DEFAULT_TABLES_RESOURCE = "cases.yaml"


def load_case_tables(path: Path | None = None) -> CaseTableSet:
    """Load case tables from ``path``, or the packaged tables when None."""
    if path is not None:
        return CaseTableSet.from_yaml(path)
    text = (
        resources.files("btcrpc_errors.data")
        .joinpath(DEFAULT_TABLES_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return CaseTableSet.from_yaml_string(text)


def case_to_spec(case: CaseConfig) -> PatternSpec:
    """Convert a YAML case into a PatternSpec; templates become patterns."""
    if case.templates:
        patterns = tuple(template_to_pattern(t) for t in case.templates)
        arity = case.arity if case.arity is not None else template_arity(case.templates[0])
    else:
        patterns = tuple(case.patterns)
        # CaseConfig guarantees an arity when there are no templates.
        arity = case.arity if case.arity is not None else 0
    return PatternSpec(
        case_name=case.name,
        arity=arity,
        patterns=patterns,
        field_names=tuple(case.fields) if case.fields is not None else None,
        examples=tuple(case.examples),
    )


def build_classifier(name: str, table: CaseTableConfig) -> CompiledClassifier:
    """Compile one table. Spec errors propagate."""
    return compile_specs(
        (case_to_spec(case) for case in table.cases),
        options=table.options,
        name=name,
    )


def build_classifiers(tables: CaseTableSet) -> dict[RpcErrorCode, CompiledClassifier]:
    """Compile every table, keyed by its RPC error code.

    Raises:
        ValueError: If a table's code is not a Bitcoin Core RPC error code.
        SpecError: If any table fails validation.
    """
    classifiers: dict[RpcErrorCode, CompiledClassifier] = {}
    for name, table in tables.tables.items():
        category = RpcErrorCode.lookup(table.code)
        if category is None:
            raise ValueError(f"table {name!r}: {table.code} is not an RPC error code")
        classifiers[category] = build_classifier(name, table)
    return classifiers
