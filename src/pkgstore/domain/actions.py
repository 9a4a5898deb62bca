"""Copy work units shared by the tree walker and the copy engine."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class CopyAction(BaseModel):
    """Copy one file from *src* to *dest* (both absolute)."""

    model_config = {"frozen": True}

    src: Path
    dest: Path


# Ordered actions handed to a single worker in one message.
WorkBatch = tuple[CopyAction, ...]
