"""
Scoped scratch files for external conversion tools

Every invocation gets its own input/output pair named from a random token.
Both files are removed on every exit path, including timeouts and crashes.
"""
import logging
import secrets
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from govdoc_backend.config import TOOL_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "govdoc_"


class ToolExecutionError(Exception):
    """The external tool failed, timed out, or could not be started"""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class MissingOutputError(ToolExecutionError):
    """The tool exited cleanly but never wrote its output file"""


def temp_artifact_path(ext: str, temp_dir: Optional[str] = None) -> Path:
    """Fresh path in the scratch dir; never derived from caller-supplied names"""
    token = secrets.token_hex(8)
    base = Path(temp_dir or tempfile.gettempdir())
    return base / f"{ARTIFACT_PREFIX}{token}.{ext}"


def remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"[WARN] Could not delete temp file {path}: {e}")


@contextmanager
def scoped_artifacts(input_ext: str, output_ext: str,
                     temp_dir: Optional[str] = None) -> Iterator[Tuple[Path, Path]]:
    """
    Reserve an input/output path pair and delete both when the scope exits

    Args:
        input_ext: Extension for the input artifact (e.g. "hwp")
        output_ext: Extension for the output artifact (e.g. "txt")
        temp_dir: Scratch directory, system temp dir when omitted

    Yields:
        (input_path, output_path)
    """
    input_path = temp_artifact_path(input_ext, temp_dir)
    output_path = temp_artifact_path(output_ext, temp_dir)
    try:
        yield input_path, output_path
    finally:
        remove_quietly(input_path)
        remove_quietly(output_path)


def run_conversion_tool(build_command: Callable[[Path, Path], List[str]],
                        data: bytes,
                        input_ext: str,
                        output_ext: str = "txt",
                        temp_dir: Optional[str] = None,
                        timeout: float = TOOL_TIMEOUT_SECONDS) -> str:
    """
    Write data to a scratch file, run a converter on it and return its text output

    Args:
        build_command: Builds the argv from (input_path, output_path)
        data: Raw input bytes
        input_ext: Extension of the input artifact
        output_ext: Extension of the output artifact
        temp_dir: Scratch directory
        timeout: Seconds before the tool is killed

    Returns:
        Contents of the output file decoded as UTF-8

    Raises:
        ToolExecutionError: non-zero exit, timeout, or missing executable
        MissingOutputError: clean exit without an output file
    """
    with scoped_artifacts(input_ext, output_ext, temp_dir) as (input_path, output_path):
        try:
            input_path.parent.mkdir(parents=True, exist_ok=True)
            input_path.write_bytes(data)
        except OSError as e:
            raise ToolExecutionError(f"could not write input file: {e}")

        command = build_command(input_path, output_path)
        logger.info(f"[TOOL] Running: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            raise ToolExecutionError(f"timed out after {timeout:g}s")
        except OSError as e:
            raise ToolExecutionError(str(e))
        finally:
            # Input is no longer needed once the tool has exited
            remove_quietly(input_path)

        stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
        if result.returncode != 0:
            logger.error(f"[TOOL] Exit status {result.returncode}, stderr: {stderr}")
            raise ToolExecutionError(stderr or f"exit status {result.returncode}", stderr=stderr)

        if not output_path.exists():
            raise MissingOutputError("output file was not created", stderr=stderr)

        text = output_path.read_text(encoding="utf-8", errors="replace")
        remove_quietly(output_path)
        return text
