from __future__ import annotations

from pathlib import Path
from typing import Any, List

from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.models import DesignNode, SimplifiedDesign
from domain.ports.repositories import DesignRepository


def parse_design_payload(payload: Any) -> SimplifiedDesign:
    """Accept a full design, a bare node list, or a single node object."""
    if isinstance(payload, list):
        return SimplifiedDesign(nodes=[DesignNode.model_validate(item) for item in payload])
    if not isinstance(payload, dict):
        msg = f"Expected a design object or a list of nodes, got {type(payload).__name__}"
        raise ValueError(msg)
    if "nodes" not in payload and "id" in payload:
        return SimplifiedDesign(nodes=[DesignNode.model_validate(payload)])
    return SimplifiedDesign.model_validate(payload)


class FileSystemDesignRepository(DesignRepository):
    def __init__(self, lock_timeout: float = -1) -> None:
        self.lock_timeout = lock_timeout

    def load(self, path: Path) -> SimplifiedDesign:
        if not path.exists():
            msg = f"Design file not found: {path}"
            raise FileNotFoundError(msg)
        return parse_design_payload(load_json(path))

    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, SimplifiedDesign]]:
        return [(path, self.load(path)) for path in sorted(directory.glob("*.json"))]

    def save(self, design: SimplifiedDesign, path: Path) -> None:
        write_json_atomic(path, design.to_dict(), self.lock_timeout)
