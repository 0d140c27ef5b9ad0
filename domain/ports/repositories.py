from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import SimplifiedDesign


class DesignRepository(Protocol):
    def load(self, path: Path) -> SimplifiedDesign: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, SimplifiedDesign]]: ...

    def save(self, design: SimplifiedDesign, path: Path) -> None: ...
