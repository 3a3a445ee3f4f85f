"""Translation usage analysis and mock props synthesis for React sources."""

from .session import AnalysisSession, analyze_project, generate_props

__all__ = ["AnalysisSession", "analyze_project", "generate_props"]
