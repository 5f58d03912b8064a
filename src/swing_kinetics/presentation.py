"""Coach-facing text/table formatting helpers."""

from __future__ import annotations

import pandas as pd

from .results_contract import SessionScoreResult


def build_score_summary_text(result: SessionScoreResult) -> str:
    """Create a short text block summarizing one scoring run."""
    scores = result.scores
    grades = scores.grades
    flows = scores.components
    lines = [
        "4B Score Snapshot",
        f"- Overall: {scores.composite} ({grades['overall']})",
        f"- Brain / Body / Bat / Ball: {scores.brain} / {scores.body} / {scores.bat} / {scores.ball}",
        f"- Ground / Core / Upper flow: {flows.ground_flow} / {flows.core_flow} / {flows.upper_flow}",
        f"- Swings analyzed: {result.swing_count}",
        f"- Leak: {result.leak.type.value.replace('_', ' ')}",
    ]
    if result.leak.caption:
        lines.append(f"  {result.leak.caption} {result.leak.training}".rstrip())

    if result.projections.has_projections:
        p = result.projections
        lines.append(
            f"- Bat speed now / ceiling: {p.bat_speed_current_mph:.0f} / "
            f"{p.bat_speed_ceiling_mph:.0f} mph "
            f"(exit velo {p.exit_velo_current_mph:.0f} / {p.exit_velo_ceiling_mph:.0f} mph)"
        )

    potential = result.kinetic_potential
    if potential is not None and potential.has_projections:
        lines.append(f"- MPH left on the table: {potential.mph_left_on_table:.1f}")

    if result.data_quality.warnings:
        lines.append("Data notes:")
        lines.extend(f"  * {warning}" for warning in result.data_quality.warnings)
    return "\n".join(lines)


def score_table(result: SessionScoreResult) -> pd.DataFrame:
    """One row per sub-score with its grade, for slide or terminal tables."""
    scores = result.scores
    rows = [
        ("Brain", scores.brain, scores.grades["brain"]),
        ("Body", scores.body, scores.grades["body"]),
        ("Bat", scores.bat, scores.grades["bat"]),
        ("Ball", scores.ball, scores.grades["ball"]),
        ("Overall", scores.composite, scores.grades["overall"]),
    ]
    return pd.DataFrame(rows, columns=["Score", "Value", "Grade"])
