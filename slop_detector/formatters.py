"""Formatters for scan results.

This module renders findings as a handoff prompt for an agent (grouped
by certainty, with action guidance), as a compact token-efficient table,
and as human-readable terminal output grouped by severity.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from .rules.base import Certainty, Finding, Severity

if TYPE_CHECKING:
    from .engine import ScanResult

MODES = ("report", "apply")
DEFAULT_MAX_FINDINGS = 50

NO_ISSUES = "## Slop Detection Results\n\nNo issues detected."

# Severity icons for human-readable output
SEVERITY_ICONS: dict[Severity, str] = {
    Severity.CRITICAL: "[CRITICAL]",
    Severity.HIGH: "[HIGH]",
    Severity.MEDIUM: "[MEDIUM]",
    Severity.LOW: "[LOW]",
}

# Section heading and action guidance per certainty tier
_CERTAINTY_SECTIONS: tuple[tuple[Certainty, str, str | None], ...] = (
    (Certainty.HIGH, "### HIGH Certainty (Definitive - trust these)", None),
    (
        Certainty.MEDIUM,
        "### MEDIUM Certainty (Verify context)",
        "_Action: Review surrounding code before applying._",
    ),
    (
        Certainty.LOW,
        "### LOW Certainty (Use judgment)",
        "_Action: May be false positives. Investigate before acting._",
    ),
)

_APPLY_GUIDANCE = "_Action: Apply fixes directly for autoFix patterns._"


def _as_findings(result_or_findings: "ScanResult | Sequence[Finding]") -> list[Finding]:
    findings = getattr(result_or_findings, "findings", result_or_findings)
    return list(findings)


def _format_repository_section(result: "ScanResult", compact: bool = False) -> str:
    """Render repository-level violations and the overall verdict."""
    output = ""
    if result.violations:
        if compact:
            output += "|Violation|Value|Threshold|Sev|\n"
            output += "|---|---|---|---|\n"
            for v in result.violations:
                output += f"|{v.type}|{v.value}|{v.threshold}|{v.severity.value[0].upper()}|\n"
        else:
            output += "### Repository Violations\n\n"
            for v in result.violations:
                icon = SEVERITY_ICONS[v.severity]
                output += f"- {icon} {v.type}: {v.value} (threshold {v.threshold})\n"
        output += "\n"
    output += f"**Verdict: {result.verdict}**"
    return output


def _fix_tag(finding: Finding) -> str:
    if finding.remediation.is_auto_fixable:
        return finding.remediation.value
    return ""


def format_findings_list(findings: Sequence[Finding]) -> str:
    """Render findings grouped by file, in first-seen file order."""
    by_file: dict[str, list[Finding]] = {}
    for finding in findings:
        by_file.setdefault(finding.file, []).append(finding)

    output = ""
    for file, file_findings in by_file.items():
        output += f"**{file}**\n"
        for finding in file_findings:
            tag = _fix_tag(finding)
            suffix = f" [{tag}]" if tag else ""
            output += f"- L{finding.line}: {finding.description}{suffix}\n"
        output += "\n"
    return output


def format_compact_prompt(
    findings: Sequence[Finding],
    mode: str = "report",
    max_findings: int = DEFAULT_MAX_FINDINGS,
) -> str:
    """Render findings as a one-line header plus a table.

    Args:
        findings: Findings to render
        mode: report or apply
        max_findings: Rows shown before truncating

    Returns:
        Markdown text
    """
    counts = {c: 0 for c in Certainty}
    auto_fixable = 0
    for finding in findings:
        counts[finding.certainty] += 1
        if finding.remediation.is_auto_fixable:
            auto_fixable += 1

    output = (
        f"## Slop: {mode}|H:{counts[Certainty.HIGH]}"
        f"|M:{counts[Certainty.MEDIUM]}|L:{counts[Certainty.LOW]}\n\n"
    )
    output += "|File|L|Pattern|Cert|Fix|\n"
    output += "|---|---|---|---|---|\n"

    for finding in findings[:max_findings]:
        fix = _fix_tag(finding) or "-"
        output += (
            f"|{finding.file}|{finding.line}|{finding.rule}"
            f"|{finding.certainty.value[0]}|{fix}|\n"
        )

    if len(findings) > max_findings:
        output += f"\n_+{len(findings) - max_findings} more findings (truncated)_\n"

    output += f"\n**Auto-fixable: {auto_fixable}** | Manual: {len(findings) - auto_fixable}"
    return output


def format_handoff_prompt(
    result_or_findings: "ScanResult | Sequence[Finding]",
    mode: str = "report",
    compact: bool = False,
    max_findings: int = DEFAULT_MAX_FINDINGS,
) -> str:
    """Format findings for an agent that reviews or applies fixes.

    Findings are grouped by certainty with action guidance:
    HIGH can be applied directly in apply mode, MEDIUM needs the
    surrounding code checked, LOW may be a false positive.

    Args:
        result_or_findings: ScanResult or a list of findings; a ScanResult
            also renders repository violations and the verdict
        mode: report or apply
        compact: Render the compact table instead
        max_findings: Row limit for the compact table

    Returns:
        Markdown text
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")

    findings = _as_findings(result_or_findings)
    # Plain finding lists carry no repository violations or verdict
    result = result_or_findings if hasattr(result_or_findings, "violations") else None
    if not findings and not (result and result.violations):
        return NO_ISSUES

    if compact:
        prompt = format_compact_prompt(findings, mode, max_findings)
        if result is not None:
            prompt += "\n\n" + _format_repository_section(result, compact=True)
        return prompt

    prompt = "## Slop Detection Results\n\n"
    prompt += f"Mode: **{mode}** | Total: {len(findings)} findings\n\n"

    for certainty, heading, guidance in _CERTAINTY_SECTIONS:
        group = [f for f in findings if f.certainty == certainty]
        if not group:
            continue
        prompt += f"{heading}\n\n"
        if certainty == Certainty.HIGH and mode == "apply":
            guidance = _APPLY_GUIDANCE
        if guidance:
            prompt += f"{guidance}\n\n"
        prompt += format_findings_list(group)
        prompt += "\n"

    auto_fixable = sum(1 for f in findings if f.remediation.is_auto_fixable)
    prompt += "### Action Summary\n\n"
    prompt += f"- Auto-fixable: {auto_fixable}\n"
    prompt += f"- Needs manual review: {len(findings) - auto_fixable}\n"
    if result is not None:
        prompt += "\n" + _format_repository_section(result) + "\n"
    return prompt


def _summary_header(findings: Sequence[Finding]) -> str:
    parts = []
    for severity in SEVERITY_ICONS:
        count = sum(1 for f in findings if f.severity == severity)
        if count:
            parts.append(f"{count} {severity.value}")
    return f"=== Slop Detection: {', '.join(parts)} ==="


def format_findings_for_display(result: "ScanResult") -> str:
    """Format a scan result for terminal output, grouped by severity."""
    findings = result.findings
    if not findings and not result.violations:
        return "[Slop Detection: No issues detected]"

    lines: list[str] = []
    if findings:
        lines.append(_summary_header(findings))
        lines.append("")

    for severity, icon in SEVERITY_ICONS.items():
        group = [f for f in findings if f.severity == severity]
        if not group:
            continue
        lines.append(f"=== {icon} ===")
        for finding in group:
            lines.append(f"{finding.location} {finding.rule} ({finding.certainty.value})")
            lines.append(f"  {finding.description}")
            if finding.excerpt:
                lines.append(f"  > {finding.excerpt}")
        lines.append("")

    if result.violations:
        lines.append("=== Repository ===")
        for violation in result.violations:
            icon = SEVERITY_ICONS[violation.severity]
            lines.append(
                f"{icon} {violation.type}: {violation.value} (threshold {violation.threshold})"
            )
        lines.append("")

    lines.append(
        f"Verdict: {result.verdict} | {result.files_analyzed}/{result.files_requested} "
        f"files in {result.execution_time_ms:.0f}ms"
    )
    return "\n".join(lines)


__all__ = [
    "NO_ISSUES",
    "SEVERITY_ICONS",
    "format_compact_prompt",
    "format_findings_for_display",
    "format_findings_list",
    "format_handoff_prompt",
]
