"""Structured output directory and console log capture for one pipeline run.

    with RunContext("clusters", params=vars(args), results_root=Path("results")) as ctx:
        write_dot(graph, ctx.data_dir / "education_graph.dot")
        plot_clusters(assignment, ctx.plots_dir / "education_clusters.png")

Layout: <results_root>/<analysis>/<YYYY-MM-DD>/{plots,data}/ plus run_log.txt
(everything printed while the context is open) and run_info.json. A relative
`latest` symlink next to the date directories points at the newest run.
"""

import io
import json
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType


class _TeeStream:
    """Write-through stream that also keeps a copy of everything written."""

    def __init__(self, original: io.TextIOBase) -> None:
        self._original = original
        self._buffer = io.StringIO()

    def write(self, data: str) -> int:
        self._original.write(data)
        self._buffer.write(data)
        return len(data)

    def flush(self) -> None:
        self._original.flush()

    def getvalue(self) -> str:
        return self._buffer.getvalue()


def _git_commit_hash() -> str:
    """Current git commit hash, or 'unknown' outside a repository."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return "unknown"


class RunContext:
    """Context manager owning one run's output directories and metadata.

    Attributes:
        analysis_name: Name of the run's analysis directory.
        params: Parameters recorded in run_info.json.
        run_dir: <results_root>/<analysis>/<date>/.
        plots_dir: PNG output.
        data_dir: DOT/CSV output.
    """

    def __init__(
        self,
        analysis_name: str,
        params: dict | None = None,
        results_root: Path | None = None,
    ) -> None:
        self.analysis_name = analysis_name
        self.params = params or {}

        root = Path(results_root) if results_root is not None else Path("results")
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")

        self.run_dir = root / analysis_name / today
        self.plots_dir = self.run_dir / "plots"
        self.data_dir = self.run_dir / "data"

        self._analysis_dir = root / analysis_name
        self._today = today
        self._tee: _TeeStream | None = None
        self._original_stdout: io.TextIOBase | None = None
        self._start_time: datetime | None = None

    def __enter__(self) -> "RunContext":
        self.setup()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.finalize()

    def setup(self) -> None:
        """Create directories and start capturing stdout."""
        self.plots_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._original_stdout = sys.stdout
        self._tee = _TeeStream(sys.stdout)
        sys.stdout = self._tee  # type: ignore[assignment]
        self._start_time = datetime.now(timezone.utc)

    def finalize(self) -> None:
        """Restore stdout, write run_log.txt and run_info.json, move `latest`."""
        log_text = ""
        if self._tee is not None:
            log_text = self._tee.getvalue()
        if self._original_stdout is not None:
            sys.stdout = self._original_stdout  # type: ignore[assignment]
        self._tee = None
        self._original_stdout = None

        (self.run_dir / "run_log.txt").write_text(log_text, encoding="utf-8")

        run_info = {
            "analysis": self.analysis_name,
            "run_date": self._today,
            "timestamp_start": (self._start_time.isoformat() if self._start_time else None),
            "timestamp_end": datetime.now(timezone.utc).isoformat(),
            "git_commit": _git_commit_hash(),
            "python_version": sys.version,
            "params": self.params,
        }
        with open(self.run_dir / "run_info.json", "w") as f:
            json.dump(run_info, f, indent=2, default=str)

        latest = self._analysis_dir / "latest"
        if latest.is_symlink():
            latest.unlink()
        elif latest.exists():
            print(f"  WARNING: {latest} is not a symlink; leaving it in place")
            return
        latest.symlink_to(self._today)
