#!/usr/bin/env python3
"""
Preview Registry - which panel shows which document

An explicit mapping from document identity to the panel displaying it, owned
by the window that hosts the panels. Opening a document that already has a
panel attaches to it instead of creating a second one.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class PreviewRegistry:
    """Registry of open preview panels keyed by document identity"""

    def __init__(self):
        self._handles: Dict[str, Any] = {}

    @staticmethod
    def identity_for(path: Union[str, Path]) -> str:
        """Document identity of a file: its resolved absolute path"""
        return str(Path(path).expanduser().resolve())

    def create_or_show(self, identity: str, factory: Callable[[], Any]) -> Tuple[Any, bool]:
        """Return the panel for identity, creating it with factory if needed.

        Returns:
            (handle, created)
        """
        existing = self._handles.get(identity)
        if existing is not None:
            logger.debug("Attaching to existing preview for %s", identity)
            return existing, False

        handle = factory()
        self._handles[identity] = handle
        logger.debug("Created preview for %s", identity)
        return handle, True

    def get(self, identity: str) -> Optional[Any]:
        return self._handles.get(identity)

    def identity_of(self, handle: Any) -> Optional[str]:
        """Reverse lookup of a handle's identity"""
        for identity, registered in self._handles.items():
            if registered is handle:
                return identity
        return None

    def remove(self, identity: str) -> Optional[Any]:
        """Forget a panel; returns it so the owner can dispose of it"""
        return self._handles.pop(identity, None)

    def identities(self) -> List[str]:
        return list(self._handles)

    def close_all(self, closer: Optional[Callable[[Any], None]] = None) -> int:
        """Remove every panel, passing each to closer; returns how many were closed"""
        handles = list(self._handles.values())
        self._handles.clear()
        if closer is not None:
            for handle in handles:
                closer(handle)
        return len(handles)

    def __contains__(self, identity: str) -> bool:
        return identity in self._handles

    def __len__(self) -> int:
        return len(self._handles)
