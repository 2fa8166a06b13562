"""Configuration models for btcrpc_errors.

Pydantic models for logging, classifier matching options, and the YAML case
tables that describe how each RPC error category's messages are classified.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


class LogConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level to capture",
    )
    format: Literal["json", "console", "both"] = Field(
        default="console",
        description="Output format: json for structured, console for human-readable, "
        "both for console to stderr and JSON to file",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path for log file output (required if format='both')",
    )
    include_timestamps: bool = Field(
        default=True,
        description="Include ISO8601 UTC timestamps in log entries",
    )

    @model_validator(mode="after")
    def _validate_file_path(self) -> LogConfig:
        if self.format == "both" and self.file_path is None:
            raise ValueError("file_path is required when format='both'")
        return self


class MatchOptions(BaseModel):
    """How a compiled classifier evaluates its patterns.

    The defaults are the strict ones. Tables that carry legacy unanchored
    patterns opt into ``anchored: false``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    anchored: bool = Field(
        default=True,
        description="Require a pattern to match the whole message. "
        "When false, a match anywhere in the message counts.",
    )
    case_sensitive: bool = Field(
        default=True,
        description="Match patterns case-sensitively",
    )
    strip_captures: bool = Field(
        default=False,
        description="Trim surrounding whitespace from captured fields. "
        "The catch-all field is always the verbatim message.",
    )
    warn_on_overlap: bool = Field(
        default=True,
        description="Warn at compile time when a case example is already "
        "matched by an earlier case",
    )


class CaseConfig(BaseModel):
    """One case of a table as written in YAML.

    Either ``patterns`` (regular expressions) or ``templates`` (``{}``
    placeholder strings) may be given, not both. A case with neither is a
    catch-all candidate.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    arity: int | None = Field(
        default=None,
        ge=0,
        description="Number of captured fields. Inferred from templates when omitted.",
    )
    patterns: list[str] = Field(default_factory=list)
    templates: list[str] = Field(default_factory=list)
    fields: list[str] | None = Field(
        default=None,
        description="Named fields. Not classifiable; rejected at compile time.",
    )
    examples: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_sources(self) -> CaseConfig:
        if self.patterns and self.templates:
            raise ValueError(
                f"case {self.name!r} sets both patterns and templates"
            )
        if self.arity is None and not self.templates:
            raise ValueError(f"case {self.name!r} needs an arity")
        return self


class CaseTableConfig(BaseModel):
    """All cases for one RPC error code, in priority order."""

    model_config = ConfigDict(extra="forbid")

    code: int
    description: str = ""
    options: MatchOptions = Field(default_factory=MatchOptions)
    cases: list[CaseConfig] = Field(min_length=1)


class CaseTableSet(BaseModel):
    """Every case table, keyed by table name (an RpcErrorCode name)."""

    model_config = ConfigDict(extra="forbid")

    tables: dict[str, CaseTableConfig]

    @model_validator(mode="after")
    def _validate_unique_codes(self) -> CaseTableSet:
        seen: dict[int, str] = {}
        for name, table in self.tables.items():
            if table.code in seen:
                raise ValueError(
                    f"tables {seen[table.code]!r} and {name!r} share code {table.code}"
                )
            seen[table.code] = name
        return self

    @classmethod
    def from_yaml(cls, path: Path) -> CaseTableSet:
        """Load case tables from a YAML file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> CaseTableSet:
        """Load case tables from a YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data)
