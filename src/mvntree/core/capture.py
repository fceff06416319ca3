"""Run a chain of processes connected by pipes and capture the last one's stdout."""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Mapping
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)


class CapturedPipeline:
    """
    Scoped capture of a process chain's final standard output.

    Each stage's stdout is piped into the next stage's stdin, like
    ``a | b | c`` in a shell. Use as a context manager::

        with CapturedPipeline([["mvn", "dependency:list"], ["sort", "-u"]]) as pipe:
            text = pipe.read()

    Output is held in memory; no process-wide stream is redirected. On exit,
    on every path, pipes are closed and any stage still running is killed
    and reaped.
    """

    def __init__(
        self,
        commands: list[list[str]],
        *,
        cwd: Path | str | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        if not commands:
            raise ValueError("a pipeline needs at least one command")
        self.commands = [list(c) for c in commands]
        self.cwd = cwd
        self.timeout = timeout
        self.env = dict(env) if env is not None else None
        self.returncodes: list[int | None] = []
        self._procs: list[subprocess.Popen] = []
        self._output: str | None = None

    def __enter__(self) -> CapturedPipeline:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def start(self) -> None:
        """Start every stage. Raises OSError if an executable cannot be launched."""
        upstream = None
        try:
            for i, command in enumerate(self.commands):
                last = i == len(self.commands) - 1
                proc = subprocess.Popen(
                    command,
                    stdin=upstream,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.DEVNULL,
                    cwd=self.cwd,
                    env=self.env,
                    encoding="utf-8" if last else None,
                    errors="replace" if last else None,
                )
                self._procs.append(proc)
                # The parent's copy must be closed so the upstream stage sees
                # SIGPIPE if the downstream one exits early.
                if upstream is not None:
                    upstream.close()
                upstream = proc.stdout
        except OSError:
            self.close()
            raise

    @staticmethod
    def _remaining(deadline: float | None) -> float | None:
        if deadline is None:
            return None
        return max(deadline - time.monotonic(), 0.0)

    def read(self) -> str:
        """Wait for the chain to finish and return everything the last stage wrote."""
        if self._output is not None:
            return self._output
        if not self._procs:
            raise RuntimeError("pipeline has not been started")
        last = self._procs[-1]
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        try:
            out, _ = last.communicate(timeout=self._remaining(deadline))
            for proc in self._procs[:-1]:
                proc.wait(timeout=self._remaining(deadline))
        finally:
            self.returncodes = [p.returncode for p in self._procs]
        self._output = out or ""
        logger.debug(f"pipeline returncodes {self.returncodes}, {len(self._output)} chars")
        return self._output

    def close(self) -> None:
        """Release pipes and reap the processes. Safe to call more than once."""
        for proc in self._procs:
            if proc.stdout is not None and not proc.stdout.closed:
                proc.stdout.close()
            if proc.poll() is None:
                proc.kill()
            proc.wait()
        self.returncodes = [p.returncode for p in self._procs]

