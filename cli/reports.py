"""Transcript rendering of chunk reports and access decisions."""

from typing import Sequence

from cli.constants import RULE
from common.types import AccessDecision, ChunkStatus, VerificationResult

HEAVY_RULE = "═" * 51


def render_existence_report(base_name: str, results: Sequence[tuple[str, bool]]) -> list[str]:
    """
    Render a manifest-driven existence check.

    Args:
        base_name: Base name that was checked
        results: Ordered ``(chunk name, exists)`` pairs

    Returns:
        Transcript lines
    """
    lines = [HEAVY_RULE, f"  CHUNK EXISTENCE CHECK: {base_name}", HEAVY_RULE, ""]
    if not results:
        lines.append("No chunks defined in metadata.")
        return lines

    present = 0
    for name, exists in results:
        lines.append(f"{'✓' if exists else '✗'} {name}: {'EXISTS' if exists else 'MISSING'}")
        present += int(exists)

    lines += ["", RULE, f"Summary: {present}/{len(results)} chunks exist"]
    if present == len(results):
        lines.append("Status: ALL CHUNKS PRESENT ✓")
    else:
        lines.append("Status: SOME CHUNKS MISSING ✗")
    return lines


def render_chunk_listing(base_name: str, names: Sequence[str]) -> list[str]:
    """Render chunk files found by name prefix (no manifest)."""
    if not names:
        return [f"No chunks found for: {base_name}"]
    return [f"Found {len(names)} chunk(s) for: {base_name}"] + [f"  ✓ {name}" for name in names]


def render_integrity_report(base_name: str, results: Sequence[VerificationResult]) -> list[str]:
    """
    Render a checksum verification, with expected and actual values per chunk.
    """
    lines = [HEAVY_RULE, f"  CRC32 INTEGRITY VALIDATION: {base_name}", HEAVY_RULE, ""]
    valid = 0
    for result in results:
        if result.status is ChunkStatus.MISSING:
            lines.append(f"✗ {result.name}: FILE NOT FOUND")
            continue
        if result.ok:
            valid += 1
            lines.append(f"✓ {result.name}: OK")
        else:
            lines.append(f"✗ {result.name}: CORRUPTED")
        lines += [f"  Expected: {result.expected}", f"  Actual:   {result.actual}", ""]

    lines += [RULE, f"Summary: {valid}/{len(results)} chunks valid"]
    if valid == len(results):
        lines.append("Status: ALL CHUNKS VALID ✓")
    else:
        lines.append("Status: SOME CHUNKS CORRUPTED ✗")
    return lines


def render_access_decision(decision: AccessDecision) -> str:
    return f"ACCESS: {decision.describe()}"
