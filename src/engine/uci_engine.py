"""UCI Engine wrapper for communicating with an external chess engine binary (ex. stockfish).

The engine binary is started once and kept running for the whole game.
Uses pexpect for reliable interactive communication with the subprocess,
which handles PTY allocation and buffering correctly.

Every failure (missing binary, crash, timeout, no move) surfaces as EngineError, so the game can continue or restart.
"""

import re
import shutil
from pathlib import Path

import pexpect
from loguru import logger

from src.core.exceptions import EngineError

BESTMOVE_PATTERN = re.compile(r"bestmove\s+(\S+)")
NO_MOVE = ("(none)", "0000")


class UCIEngine:
    """UCI protocol wrapper.

    Example:
        engine = UCIEngine("/usr/bin/stockfish")
        engine.set_position(fen)
        move = engine.best_move()
        engine.close()

    Or as a context manager:
        with UCIEngine("/usr/bin/stockfish") as engine:
            ...
    """

    def __init__(
        self,
        binary_path: str | Path,
        *,
        timeout: float = 10.0,
        go_options: dict[str, int | str] | None = None,
    ) -> None:
        """Initialize the UCI engine.

        Args:
            binary_path: Path to the UCI engine executable (or its name on the PATH).
            timeout: Timeout in seconds for every UCI response.
            go_options: Options for the 'go' command (e.g., {'movetime': 1000}).
        """
        resolved = shutil.which(str(binary_path))
        if resolved is None:
            raise EngineError(
                f"Engine binary not found: {binary_path}. Make sure you specified the right path to the chess engine."
            )

        self.binary_path = Path(resolved)
        self.timeout = timeout
        self.go_options = go_options or {"movetime": 1000}
        self._position: str | None = None
        self._child: pexpect.spawn | None = None
        self._start_engine()

    def _start_engine(self) -> None:
        """Start the UCI engine subprocess."""
        logger.debug(f"Starting UCI engine: {self.binary_path}")
        try:
            self._child = pexpect.spawn(
                str(self.binary_path),
                encoding="utf-8",
                timeout=self.timeout,
            )
        except pexpect.ExceptionPexpect as exc:
            raise EngineError(f"Could not start engine {self.binary_path}: {exc}") from exc

        # Initialize UCI protocol
        self._send_command("uci")
        self._wait_for_response("uciok")

        self._send_command("isready")
        self._wait_for_response("readyok")

        logger.debug("UCI engine initialized")

    def _send_command(self, command: str) -> None:
        """Send a command to the engine."""
        if self._child is None:
            raise EngineError("Engine not running")

        logger.trace(f"UCI send: {command}")
        self._child.sendline(command)

    def _wait_for_response(self, expected: str) -> str:
        """Wait for a specific response from the engine. Returns what the engine printed before it."""
        if self._child is None:
            raise EngineError("Engine not running")

        try:
            self._child.expect(expected, timeout=self.timeout)
        except pexpect.TIMEOUT as exc:
            raise EngineError(f"Timeout waiting for '{expected}'") from exc
        except pexpect.EOF as exc:
            raise EngineError("Engine process terminated unexpectedly") from exc
        return self._child.before or ""

    def set_position(self, fen: str) -> None:
        self._position = fen
        self._send_command(f"position fen {fen}")

    def best_move(self) -> str:
        """Ask the engine to search the position last set and return its move in UCI notation."""
        if self._position is None:
            raise EngineError("No position set before asking for the best move")

        go_parts = ["go"]
        for key, value in self.go_options.items():
            go_parts.extend([key, str(value)])
        self._send_command(" ".join(go_parts))

        self._wait_for_response("bestmove")
        # Read the rest of the line after "bestmove"
        rest_of_line = self._wait_for_response(r"\r?\n")
        return parse_bestmove("bestmove" + rest_of_line)

    def close(self) -> None:
        """Close the engine subprocess."""
        if self._child is None:
            return
        try:
            self._send_command("quit")
            self._child.expect(pexpect.EOF, timeout=self.timeout)
        except (EngineError, pexpect.ExceptionPexpect) as exc:
            logger.warning(f"Engine did not quit cleanly ({exc}), terminating it")
            self._child.terminate(force=True)
        finally:
            self._child = None

    def __enter__(self) -> "UCIEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def parse_bestmove(text: str) -> str:
    """Extract the move from an engine line like 'bestmove e7e5 ponder g1f3'."""
    match = BESTMOVE_PATTERN.search(text)
    if match is None:
        raise EngineError(f"Engine did not answer with a best move: {text!r}")

    move_uci = match.group(1)
    if move_uci in NO_MOVE:
        raise EngineError("Engine found no move in this position")
    return move_uci
