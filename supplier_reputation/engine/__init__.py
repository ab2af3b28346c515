"""Reputation orchestration."""

from .orchestrator import ReputationEngine, assemble_bundle

__all__ = ["ReputationEngine", "assemble_bundle"]
