from __future__ import annotations

import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from gaswiz.core.protocol import GeneratedArtifacts

WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class ArtifactBundle:
    files: Dict[str, str]  # file name -> content

    @classmethod
    def from_artifacts(cls, artifacts: GeneratedArtifacts) -> "ArtifactBundle":
        return cls(files=artifacts.to_files())


def archive_name(project_name: str) -> str:
    return f"{WHITESPACE_RE.sub('_', project_name.strip())}_project.zip"


def write_file_bundle(bundle: ArtifactBundle, out_dir: Path) -> List[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for name, content in bundle.files.items():
        # Normalize paths
        name = name.lstrip("/").replace("\\", "/")
        target = out_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        written.append(target)
    return written


def write_zip_bundle(bundle: ArtifactBundle, zip_path: Path) -> Path:
    zip_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in bundle.files.items():
            zf.writestr(name, content)
    return zip_path
