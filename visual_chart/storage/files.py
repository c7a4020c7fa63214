"""Chart file output: default paths, saving, and opening in a viewer."""

from __future__ import annotations

import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path

from ..core.logging_config import get_logger

logger = get_logger(__name__)


def _iso_timestamp() -> str:
    # Millisecond precision with a trailing Z, filesystem-safe
    now = datetime.now(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def get_default_output_path(
    chart_type: str,
    extension: str = "png",
    output_dir: Path | str | None = None,
) -> str:
    """Build ``{output_dir}/{chart_type}-{timestamp}.{extension}``.

    Args:
        chart_type: Chart family or ``"vega"`` for Vega-Lite charts
        extension: File extension without the dot
        output_dir: Target directory (defaults to ``./charts``)
    """
    directory = Path(output_dir) if output_dir else Path.cwd() / "charts"
    return str(directory / f"{chart_type}-{_iso_timestamp()}.{extension}")


def save_chart(buffer: bytes, output_path: str | Path) -> Path:
    """Write chart bytes to disk, creating parent directories as needed.

    Raises:
        OSError: If the directory cannot be created or the file written
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(buffer)
    logger.info(f"Chart saved to: {path}", extra={"bytes": len(buffer)})
    return path


def _open_command(file_path: str) -> list[str]:
    if sys.platform == "darwin":
        return ["open", file_path]
    if sys.platform == "win32":
        return ["cmd", "/c", "start", "", file_path]
    return ["xdg-open", file_path]


def open_chart(file_path: str | Path) -> bool:
    """Open a saved chart in the OS default viewer without waiting for it.

    Failures are logged and reported through the return value only.
    """
    command = _open_command(str(file_path))
    try:
        subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        logger.warning(f"Failed to open chart: {e}", extra={"path": str(file_path)})
        return False
    logger.info(f"Opened chart: {file_path}")
    return True
