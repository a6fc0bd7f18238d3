"""
Bidirectional dimension reconciliation for plots and rooms.

Keeps (length, breadth, area) consistent when the user edits one of them.
When only the area is known, length is the dimension preserved.
"""

import math
from typing import Optional

from schemas import Dimensions, DimensionField, PlotAnalysis


def _r2(value: float) -> float:
    return round(value, 2)


def reconcile(current: Dimensions, edited_field: DimensionField, new_value: float) -> Dimensions:
    """
    Apply a single-field edit and return the reconciled triple.

    Editing a side recomputes the area from both sides. Editing the area
    recomputes breadth from a known length, else length from a known
    breadth, else assumes a square. A non-positive area leaves the sides
    untouched.
    """
    length, breadth, area = current.length, current.breadth, current.area
    edited_field = DimensionField(edited_field)

    if edited_field is DimensionField.LENGTH:
        length = new_value
        area = _r2(length * breadth)
    elif edited_field is DimensionField.BREADTH:
        breadth = new_value
        area = _r2(length * breadth)
    else:
        area = new_value
        if area > 0:
            if length > 0:
                breadth = _r2(area / length)
            elif breadth > 0:
                length = _r2(area / breadth)
            else:
                length = breadth = _r2(math.sqrt(area))

    return Dimensions(length=length, breadth=breadth, area=area)


def apply_plot_analysis(current: Dimensions, analysis: Optional[PlotAnalysis]) -> Dimensions:
    """Overlay detected plot measurements; missing or zero readings keep the current value."""
    if analysis is None:
        return current
    return Dimensions(
        length=analysis.length or current.length,
        breadth=analysis.breadth or current.breadth,
        area=analysis.total_area or current.area,
    )
