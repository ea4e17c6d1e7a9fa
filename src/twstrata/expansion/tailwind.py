"""Tailwind CSS v4 CLI expansion engine.

The composed input is written to a hidden file beside the group's source CSS
so that relative ``@import`` and ``@reference`` paths resolve exactly as they
would for the source file itself. Tailwind's CLI runs Lightning CSS, which
takes care of vendor prefixes.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Sequence

from twstrata.errors import ExpansionError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND: tuple[str, ...] = ("npx", "@tailwindcss/cli")


class TailwindCliEngine:
    """Runs ``<command> --input <file> --output -`` and returns stdout."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        *,
        cwd: str | None = None,
        timeout: float = 120.0,
    ) -> None:
        if not command:
            raise ValueError("Tailwind command must not be empty")
        self._command = list(command)
        self._cwd = cwd or os.getcwd()
        self._timeout = timeout

    def expand(self, css: str, *, source_path: Path) -> str:
        source_path = Path(source_path)
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{source_path.stem}.", suffix=".css", dir=source_path.parent
            )
        except OSError as exc:
            raise ExpansionError(
                f"Cannot stage Tailwind input beside {source_path}: {exc}",
                group=source_path.stem,
                cause=exc,
            ) from exc
        try:
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(css)
            except OSError as exc:
                raise ExpansionError(
                    f"Cannot write Tailwind input {tmp_name}: {exc}",
                    group=source_path.stem,
                    cause=exc,
                ) from exc
            return self._run(tmp_name, source_path)
        finally:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass

    def _run(self, input_path: str, source_path: Path) -> str:
        argv = [*self._command, "--input", input_path, "--output", "-"]
        logger.debug("Running %s", " ".join(argv))
        start = time.monotonic()
        try:
            proc = subprocess.run(
                argv,
                cwd=self._cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ExpansionError(
                f"Tailwind command not found: {self._command[0]}",
                group=source_path.stem,
                cause=exc,
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExpansionError(
                f"Tailwind timed out after {self._timeout:.0f}s on {source_path}",
                group=source_path.stem,
                cause=exc,
            ) from exc
        except OSError as exc:
            raise ExpansionError(
                f"Cannot run Tailwind command {self._command[0]}: {exc}",
                group=source_path.stem,
                cause=exc,
            ) from exc

        stdout = proc.stdout.decode("utf-8", errors="replace")
        stderr = proc.stderr.decode("utf-8", errors="replace")
        duration_ms = int((time.monotonic() - start) * 1000)

        if proc.returncode != 0:
            raise ExpansionError(
                f"Tailwind exited with code {proc.returncode} for {source_path}",
                group=source_path.stem,
                stderr=stderr.strip(),
            )
        for line in stderr.splitlines():
            if line.strip():
                logger.debug("tailwind: %s", line.strip())
        logger.debug("Expanded %s in %dms", source_path.name, duration_ms)
        return stdout
