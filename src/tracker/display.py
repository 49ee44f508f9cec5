"""Presentation attributes for the domain enums.

The tracker core only deals in enum tags; renderers look labels, colors and
icons up here.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.models.tracking import CycleStatus, FlowIntensity, SymptomType


@dataclass(frozen=True)
class DisplayStyle:
    label: str
    color: str
    icon: str | None = None


FLOW_STYLES: dict[FlowIntensity, DisplayStyle] = {
    FlowIntensity.light: DisplayStyle("Light", "rgba(255, 45, 85, 0.3)"),
    FlowIntensity.medium: DisplayStyle("Medium", "rgba(255, 45, 85, 0.6)"),
    FlowIntensity.heavy: DisplayStyle("Heavy", "rgba(255, 45, 85, 0.9)"),
}

SYMPTOM_STYLES: dict[SymptomType, DisplayStyle] = {
    SymptomType.cramps: DisplayStyle("Cramps", "#ff9500", "bolt.fill"),
    SymptomType.headache: DisplayStyle("Headache", "#ff9500", "brain.head.profile"),
    SymptomType.mood_swings: DisplayStyle("Mood swings", "#ff9500", "face.dashed"),
    SymptomType.bloating: DisplayStyle("Bloating", "#ff9500", "stomach"),
    SymptomType.fatigue: DisplayStyle("Fatigue", "#ff9500", "bed.double.fill"),
    SymptomType.acne: DisplayStyle("Acne", "#ff9500", "face.smiling"),
    SymptomType.breast_tenderness: DisplayStyle("Breast tenderness", "#ff9500", "heart.fill"),
}

STATUS_STYLES: dict[CycleStatus, DisplayStyle] = {
    CycleStatus.period: DisplayStyle("Period", "#ff3b30"),
    CycleStatus.ovulation: DisplayStyle("Ovulation", "#007aff"),
    CycleStatus.normal: DisplayStyle("Normal", "rgba(142, 142, 147, 0.3)"),
}


def clamp_progress(progress: float | None) -> float:
    """Progress-bar value in [0, 1]; the predictor itself never clamps."""
    if progress is None:
        return 0.0
    return min(1.0, max(0.0, progress))
