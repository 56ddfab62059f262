"""
HWP text extraction via the hwp5txt command (installed with pyhwp)
"""
import logging
import shlex
from pathlib import Path
from typing import List, Optional

from govdoc_backend.errors import ExtractionError
from govdoc_backend.utils.temp_workspace import (
    MissingOutputError,
    ToolExecutionError,
    run_conversion_tool,
)

logger = logging.getLogger(__name__)


def build_hwp5txt_command(command: str, input_path: Path, output_path: Path) -> List[str]:
    """hwp5txt --output <txt> <hwp>"""
    return shlex.split(command) + ["--output", str(output_path), str(input_path)]


def extract_text_from_hwp(data: bytes, command: str = "hwp5txt",
                          temp_dir: Optional[str] = None) -> str:
    """
    Extract plain text from an HWP document

    Args:
        data: Raw HWP bytes
        command: hwp5txt executable (may include leading arguments)
        temp_dir: Scratch directory for the input/output artifacts

    Returns:
        Extracted text

    Raises:
        ExtractionError: tool failure, timeout, or missing output
    """
    logger.info(f"[HWP] Extracting text ({len(data)} bytes)")
    try:
        text = run_conversion_tool(
            lambda input_path, output_path: build_hwp5txt_command(command, input_path, output_path),
            data,
            input_ext="hwp",
            output_ext="txt",
            temp_dir=temp_dir,
        )
    except MissingOutputError:
        raise ExtractionError("HWP 텍스트 추출 결과 파일이 없습니다.")
    except ToolExecutionError as e:
        logger.error(f"[HWP] hwp5txt error: {e}")
        raise ExtractionError(f"HWP 텍스트 추출 실패 (pyhwp 오류): {e}")

    logger.info(f"[HWP] Extracted {len(text)} characters")
    return text
