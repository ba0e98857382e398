"""Processing result model."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from cytubegen.models.manifest import CytubeVideo
from cytubegen.models.plan import TranscodePlan


@dataclass
class ProcessResult:
    """Result of processing a single file."""

    status: Literal["success", "dry_run", "failed", "error"]
    file_path: Optional[Path] = None
    output_dir: Optional[Path] = None
    manifest_path: Optional[Path] = None
    plan: Optional[TranscodePlan] = None
    manifest: Optional[CytubeVideo] = None
    reason: Optional[str] = None  # Reason for failure
    error: Optional[str] = None  # Error message if errored

    @property
    def ok(self) -> bool:
        return self.status in ("success", "dry_run")

    def __str__(self) -> str:
        """Human-readable representation."""
        name = self.file_path.name if self.file_path else "<unknown>"
        outputs = len(self.plan.destinations()) if self.plan else 0
        if self.status == "success":
            return f"✓ {name}: {outputs} file(s) written to {self.output_dir}"
        elif self.status == "dry_run":
            return f"⊙ {name}: Would write {outputs} file(s) to {self.output_dir} (dry run)"
        else:
            return f"✗ {name}: Failed ({self.error or self.reason})"
