import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def save_json(path: str | Path, data: Any, *, indent: int = 2) -> Path:
    """Write data as JSON, creating parent directories and overwriting."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
    logger.info("JSON saved as %s", output_path)
    return output_path
