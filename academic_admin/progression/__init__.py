"""
Academic progression engine.

Decides when a student has completed their current step and moves them to
the next one, or graduates them at the end of the curriculum.
"""

from academic_admin.progression.catalog import StepCatalog, StepCatalogEntry, invalidate_catalog, load_catalog
from academic_admin.progression.completion import evaluate_step, is_step_complete, resolve_override
from academic_admin.progression.engine import ProgressionResult, change_step, evaluate_and_advance, find_student
from academic_admin.progression.steps import classify, is_jump_step, is_successful, next_step_label, parse_step_number

__all__ = [
    'ProgressionResult',
    'StepCatalog',
    'StepCatalogEntry',
    'change_step',
    'classify',
    'evaluate_and_advance',
    'evaluate_step',
    'find_student',
    'invalidate_catalog',
    'is_jump_step',
    'is_step_complete',
    'is_successful',
    'load_catalog',
    'next_step_label',
    'parse_step_number',
    'resolve_override',
]
