"""Render module for tax and benefit output display."""

from render.renderers import (
    BaseRenderer,
    TaxDetailsRenderer,
    ClaimingScenariosRenderer,
    CoupleStrategiesRenderer,
    ScheduleRenderer,
    PensionOffsetRenderer,
    RENDERER_REGISTRY,
    SOURCE_TAX,
    SOURCE_BENEFIT,
    format_currency,
)

__all__ = [
    'BaseRenderer',
    'TaxDetailsRenderer',
    'ClaimingScenariosRenderer',
    'CoupleStrategiesRenderer',
    'ScheduleRenderer',
    'PensionOffsetRenderer',
    'RENDERER_REGISTRY',
    'SOURCE_TAX',
    'SOURCE_BENEFIT',
    'format_currency',
]
