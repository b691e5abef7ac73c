"""
Cross-cutting ticket workflows
"""
from .assignment import AssignmentWorkflow

__all__ = ["AssignmentWorkflow"]
