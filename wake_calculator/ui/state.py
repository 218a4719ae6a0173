from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .. import calibration as CAL


@dataclass
class UIState:
    file_name: str = ""
    rows: List[Dict[str, Any]] = field(default_factory=list)
    constants: Dict[str, float] = field(default_factory=lambda: dict(CAL.DEFAULT_CONSTANTS))
    sign_correction: bool = CAL.SIGN_CORRECTION_ENABLED
    last_result: Optional[Any] = None

    def clear_table(self) -> None:
        self.file_name = ""
        self.rows = []
        self.last_result = None
