"""Tutorial assembly: merge analyses into one document model and save it."""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from autotutor.lib.errors import CollaboratorError

__all__ = ["file_structure_visual", "prepare_tutorial_data", "save_tutorial_files"]

logger = logging.getLogger(__name__)

_ROOT_FILE_LIMIT = 10
_DIR_FILE_LIMIT = 5
_MAX_VISUAL_LINES = 50


def _section(analysis: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = analysis.get(key)
    return value if isinstance(value, Mapping) else {}


def file_structure_visual(structure: Mapping[str, Any]) -> str:
    """Render the capped file list as a compact tree grouped by directory.

    Root shows up to 10 files and each directory up to 5, with a count of the
    rest; the whole tree is cut at 50 lines.
    """
    files = structure.get("files")
    if not files:
        return "No file structure available"

    dirs: dict[str, list[str]] = defaultdict(list)
    for info in files:
        dirs[info.get("directory") or ""].append(info["name"])

    lines: list[str] = []
    for dir_name in sorted(dirs):
        names = sorted(dirs[dir_name])
        if dir_name == "":
            lines.extend(f"├── {name}" for name in names[:_ROOT_FILE_LIMIT])
            if len(names) > _ROOT_FILE_LIMIT:
                lines.append(
                    f"├── ... and {len(names) - _ROOT_FILE_LIMIT} more files"
                )
        else:
            lines.append(f"├── {dir_name}/")
            lines.extend(f"│   ├── {name}" for name in names[:_DIR_FILE_LIMIT])
            if len(names) > _DIR_FILE_LIMIT:
                lines.append(
                    f"│   └── ... and {len(names) - _DIR_FILE_LIMIT} more files"
                )
    return "\n".join(lines[:_MAX_VISUAL_LINES])


def prepare_tutorial_data(
    analysis: Mapping[str, Any],
    repo_info: Mapping[str, Any],
    structure: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge the four analyses, repo identity and structure into one model.

    Missing or unparsed analysis fields fall back to neutral defaults so the
    tutorial prompt always sees the same shape.
    """
    overview = _section(analysis, "overview")
    relationships = _section(analysis, "relationships")
    components = _section(analysis, "components")
    setup = _section(analysis, "setup")
    owner = repo_info.get("owner") or ""
    name = repo_info.get("name") or ""

    return {
        "repository": {
            "name": name or "Unknown",
            "owner": owner or "Unknown",
            "url": f"https://github.com/{owner}/{name}",
            "generated_at": datetime.now(UTC).isoformat(),
        },
        "overview": {
            "purpose": overview.get("purpose") or "Purpose not analyzed",
            "technology_stack": overview.get("technology_stack") or [],
            "architecture_type": overview.get("architecture_type") or "Unknown",
            "target_audience": overview.get("target_audience") or "Unknown",
            "complexity_level": overview.get("complexity_level") or "Unknown",
            "complexity_reasoning": overview.get("complexity_reasoning") or "",
            "flows": overview.get("flows") or {},
            "apk_name": overview.get("apk_name") or "Unknown",
            "android_package": overview.get("android_package") or "Unknown",
        },
        "structure": {
            "total_files": structure.get("total_files") or 0,
            "languages": structure.get("languages") or {},
            "entry_points": relationships.get("entry_points") or [],
            "key_components": relationships.get("key_components") or [],
        },
        "components": components.get("components") or [],
        "data_flow": relationships.get("data_flow") or "Data flow not analyzed",
        "dependencies": relationships.get("dependencies") or {},
        "setup": {
            "prerequisites": setup.get("prerequisites") or [],
            "running_instructions": setup.get("running_instructions") or [],
            "flows": setup.get("flows") or [],
        },
        "file_structure_visual": file_structure_visual(structure),
    }


def save_tutorial_files(
    tutorial: Mapping[str, Any],
    output_dir: Path,
    repo_name: str,
) -> dict[str, Path]:
    """Write ``<repo>_tutorial.md`` and ``<repo>_data.json`` into *output_dir*."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        md_path = output_dir / f"{repo_name}_tutorial.md"
        md_path.write_text(str(tutorial.get("markdown", "")), encoding="utf-8")
        json_path = output_dir / f"{repo_name}_data.json"
        json_path.write_text(
            json.dumps(tutorial.get("data", {}), indent=2), encoding="utf-8"
        )
    except OSError as exc:
        msg = f"Failed to save tutorial files: {exc}"
        raise CollaboratorError(msg) from exc
    logger.info("Saved tutorial files to %s", output_dir)
    return {"markdown": md_path, "json": json_path}
