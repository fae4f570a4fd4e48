"""Manual override and exemption rules for test verdicts."""

from typing import Optional

from ..models.test_run import ExemptionKind, Override, Verdict


def effective_verdict(computed: Optional[Verdict], override: Optional[Verdict]) -> Verdict:
    """An override, when set, always supersedes the computed verdict."""
    if override is not None:
        return override
    return computed or Verdict.UNKNOWN


def resolve_override(
    override: Override,
    reason: Optional[str],
) -> tuple[Optional[Verdict], Optional[str]]:
    """
    Validate an override choice.

    Returns:
        (override verdict, stored reason); both None when the override is cleared

    Raises:
        ValueError: if pass/fail is chosen without a reason
    """
    if override == Override.NONE:
        return None, None

    reason = (reason or "").strip()
    if not reason:
        raise ValueError("Override reason is required when setting an override")

    if override == Override.PASS:
        return Verdict.PASS, reason
    return Verdict.FAIL, reason


def exemption_reason(kind: ExemptionKind, note: Optional[str] = None) -> str:
    """Structured reason recorded for an exemption."""
    reason = f"Exempt ({kind.label})"
    note = (note or "").strip()
    if note:
        reason = f"{reason}: {note}"
    return reason
