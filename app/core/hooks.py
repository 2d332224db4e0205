"""
Post-commit hooks
Side effects that run only after a business transaction has committed
"""

from typing import Any, Awaitable, Callable, Dict, List, Tuple
import logging

logger = logging.getLogger(__name__)

class PostCommitHooks:
    """
    Ordered list of async callables executed after commit

    Each hook is isolated: a failure is logged and the remaining hooks
    still run. Nothing raised by a hook reaches the caller.
    """

    def __init__(self):
        self._hooks: List[Tuple[str, Callable[..., Awaitable[Any]], tuple, dict]] = []

    def add(self, func: Callable[..., Awaitable[Any]], *args, name: str = None, **kwargs) -> None:
        """Register a hook"""
        self._hooks.append((name or func.__name__, func, args, kwargs))

    @property
    def names(self) -> List[str]:
        return [name for name, _, _, _ in self._hooks]

    async def run(self) -> Dict[str, bool]:
        """Run every hook in registration order"""
        results: Dict[str, bool] = {}

        for name, func, args, kwargs in self._hooks:
            try:
                outcome = await func(*args, **kwargs)
                results[name] = outcome is not False
            except Exception:
                logger.exception(f"Post-commit hook {name} failed")
                results[name] = False

        return results
