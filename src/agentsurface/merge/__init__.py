"""Runtime merger package for agentsurface-sdk."""
from __future__ import annotations

from agentsurface.merge.merger import MergeResult, RuntimeMerger, merge
from agentsurface.merge.runtime import RuntimeConfig

__all__ = ["MergeResult", "RuntimeConfig", "RuntimeMerger", "merge"]
