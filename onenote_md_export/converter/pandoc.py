"""Word document to Markdown conversion with pandoc."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """pandoc could not convert a document."""


class PandocConverter:
    """Runs the pandoc executable to turn a .docx file into GitHub Markdown."""

    def __init__(self, pandoc_path: str = "pandoc", extra_args: list[str] | None = None) -> None:
        self.pandoc_path = pandoc_path
        self.extra_args = list(extra_args or [])

    def command(self, docx_path: Path, media_dir: Path) -> list[str]:
        return [
            self.pandoc_path,
            str(docx_path),
            "--from=docx",
            "--to=gfm",
            "--wrap=none",
            f"--extract-media={media_dir}",
            *self.extra_args,
        ]

    def convert_docx_to_md(self, docx_path: str | Path, work_dir: str | Path) -> str:
        """Convert ``docx_path`` and return the Markdown text.

        Images are extracted under ``work_dir`` and referenced from the
        Markdown by absolute path.
        """
        media_dir = Path(work_dir).resolve()
        media_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.command(Path(docx_path).resolve(), media_dir)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                cwd=str(media_dir),
            )
        except FileNotFoundError as exc:
            raise ConversionError(f"pandoc not found: {self.pandoc_path}") from exc
        except subprocess.CalledProcessError as exc:
            raise ConversionError(
                f"pandoc failed on {docx_path}: {exc.stderr.strip()}"
            ) from exc
        return result.stdout
