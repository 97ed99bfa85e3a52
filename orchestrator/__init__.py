"""
Orchestration package for coordinating sync pipeline phases.

This package provides the layer that sequences every phase of a run:
Checkout → Flatten → Post-process → Publish → Report.
"""

from .sync_orchestrator import SyncOrchestrator
from .sync_report import SyncReport

__all__ = [
    'SyncOrchestrator',
    'SyncReport'
]
