from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import ALL_CLASSES_SUFFIX
from ..core.enums import Role


@dataclass(frozen=True)
class ReportMeta:
    """Identifying metadata printed on, and used to name, an export."""

    generated_at: datetime
    class_label: Optional[str] = None
    viewer_role: Optional[Role] = None

    @property
    def display_label(self) -> str:
        return self.class_label or "All Classes"

    @property
    def file_suffix(self) -> str:
        if not self.class_label:
            return ALL_CLASSES_SUFFIX
        return re.sub(r"\s+", "_", self.class_label.strip())

    @property
    def title_suffix(self) -> str:
        return " (Department Staff View)" if self.viewer_role == Role.STAFF else ""


@dataclass(frozen=True)
class ExportResult:
    """Either a ready artifact or a warning explaining why there is none."""

    filename: str
    mimetype: str
    content: Optional[bytes] = None
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.content is not None
