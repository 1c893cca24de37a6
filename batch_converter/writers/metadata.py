"""JSON summary writer: document information, page count and parts."""

from __future__ import annotations

import json
from typing import Any, Dict

from ..outputs import OutputFile
from ..registry import register_writer
from ..types import OptionKey, UnitType, WriterOptions


@register_writer("json")
class MetadataWriter:
    def write(self, document: Any, handle: OutputFile, options: WriterOptions) -> None:
        unit = options.get(OptionKey.UNIT_TYPE, UnitType.WHOLE)
        summary: Dict[str, Any] = {
            "name": document.name,
            "pages": document.page_count,
            "unit": unit.value,
            "metadata": {str(key): str(value) for key, value in dict(document.metadata).items()},
        }
        parts = getattr(document, "parts", None)
        if callable(parts):
            summary["parts"] = [{"name": part.name, "pages": part.page_count} for part in parts()]

        payload = json.dumps(summary, indent=2, sort_keys=True, ensure_ascii=False)
        handle.write(payload.encode("utf-8"))
