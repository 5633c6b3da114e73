"""Rule selection and severity configuration."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from rsdiag.diagnostics import SEVERITIES, Severity
from rsdiag.lint.rules import LintRule


@dataclass(frozen=True, slots=True)
class LintOptions:
    """Which rules run and at what severity.

    Rules are selected by code (`LINT_STYLE_STRUCT_SHORTHAND`) or by name
    (`structShorthandInitialization`). `enabled=None` means every rule.
    """

    enabled: frozenset[str] | None = None
    disabled: frozenset[str] = frozenset()
    severity_overrides: Mapping[str, Severity] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        for key, severity in self.severity_overrides.items():
            if severity not in SEVERITIES:
                raise ValueError(
                    f"Severity override for `{key}` is `{severity}`; expected error/warning/weak_warning."
                )


def select_lint_rules(rules: Sequence[LintRule], options: LintOptions | None) -> tuple[LintRule, ...]:
    """Apply `options` to `rules`, preserving registration order."""
    if options is None:
        return tuple(rules)

    known = {rule.code for rule in rules} | {rule.name for rule in rules}
    referenced = set(options.disabled) | set(options.severity_overrides)
    if options.enabled is not None:
        referenced |= options.enabled
    unknown = sorted(referenced - known)
    if unknown:
        raise ValueError(f"Unknown lint rule(s): {', '.join(unknown)}")

    selected: list[LintRule] = []
    for rule in rules:
        keys = {rule.code, rule.name}
        if options.enabled is not None and not keys & options.enabled:
            continue
        if keys & options.disabled:
            continue
        severity = options.severity_overrides.get(rule.code, options.severity_overrides.get(rule.name))
        if severity is not None and severity != rule.severity:
            rule = replace(rule, severity=severity)  # type: ignore[type-var]
        selected.append(rule)
    return tuple(selected)
