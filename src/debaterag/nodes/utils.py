"""
Helpers shared by the pipeline nodes.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from debaterag.errors import DebateRagError

T = TypeVar("T")


async def bounded(
    awaitable: Awaitable[T],
    timeout: float,
    error_cls: type[DebateRagError],
    what: str,
) -> T:
    """
    Await an external call with a timeout.

    Application errors pass through unchanged; a timeout or any other
    exception is re-raised as error_cls.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except DebateRagError:
        raise
    except asyncio.TimeoutError as e:
        raise error_cls(f"{what} timed out after {timeout:.1f}s") from e
    except Exception as e:
        raise error_cls(f"{what} failed: {e}") from e
