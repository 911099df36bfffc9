r"""Reference operation descriptors."""

from __future__ import annotations

__all__ = ["PublishOperation", "PublishResult", "TimeOperation", "TimeResult"]

from pnendpoint.operations.publish import PublishOperation, PublishResult
from pnendpoint.operations.time import TimeOperation, TimeResult
