from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


@dataclass
class TelemetryLogger:
    """Append-only JSON-lines manifest of a generation run."""

    path: Optional[Path] = None
    enabled: bool = True
    flush_each_write: bool = False
    generated: int = 0
    failed: int = 0
    _started_at: float = field(default_factory=time.time)

    def init(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Touch file (don't overwrite)
        self.path.touch(exist_ok=True)
        self.generated = 0
        self.failed = 0
        self._started_at = time.time()
        self.log("telemetry_init", file=str(self.path))

    def log(self, event: str, **fields: Any) -> None:
        if not self.enabled or self.path is None:
            return

        row: Dict[str, Any] = {
            "t": time.time(),
            "ts": _now_iso(),
            "event": event,
            **fields,
        }

        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False, default=str) + "\n")
                if self.flush_each_write:
                    f.flush()
        except OSError:
            # A manifest write failure never fails the build.
            return

    def asset_generated(self, kind: str, asset_id: str, files: Dict[str, str], **fields: Any) -> None:
        self.generated += 1
        self.log("asset_generated", kind=kind, asset_id=asset_id, files=files, **fields)

    def asset_failed(self, failure: Dict[str, Any]) -> None:
        self.failed += 1
        self.log("asset_failed", **failure)

    def batch_complete(self, **fields: Any) -> Dict[str, Any]:
        summary = {
            "generated": self.generated,
            "failed": self.failed,
            "elapsed": round(time.time() - self._started_at, 3),
            **fields,
        }
        self.log("batch_complete", **summary)
        return summary


# global singleton (easy import everywhere)
telemetry = TelemetryLogger()
