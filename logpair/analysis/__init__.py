"""
Analysis Module

Session state for one analyze action.
"""

from .session import LogAnalysisSession

__all__ = ["LogAnalysisSession"]
