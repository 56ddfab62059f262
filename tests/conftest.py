"""
Shared fixtures: a substitutable generative backend, a fake hwp5txt tool,
and DOCX fixtures built with python-docx
"""
import base64
import io
import json
import shlex
import sys
import textwrap
import zipfile

import pytest
from docx import Document
from fastapi.testclient import TestClient

from govdoc_backend.api import create_app
from govdoc_backend.config import Settings

VALID_RESULT = {
    "summary": "2025년 5월 31일까지 종합소득세 87,000원을 납부해야 합니다.",
    "documentType": "종합소득세 납부고지서",
    "sentiment": "URGENT",
    "actions": [
        {
            "description": "종합소득세 납부",
            "deadline": "2025-05-31",
            "amount": "87,000원",
            "recipient": "국세청",
            "priority": "HIGH",
        },
        {
            "description": "지방소득세 납부",
            "deadline": None,
            "amount": None,
            "recipient": None,
            "priority": "MEDIUM",
        },
    ],
    "keyTerms": [{"term": "가산세", "definition": "기한을 넘기면 추가로 내는 세금"}],
}


class FakeBackend:
    """Records calls and replays canned responses"""

    def __init__(self, structured_text=None, chat_text="문서에 따르면 **2025-05-31**까지 납부해야 합니다.",
                 structured_error=None, chat_error=None):
        self.structured_text = json.dumps(VALID_RESULT, ensure_ascii=False) if structured_text is None else structured_text
        self.chat_text = chat_text
        self.structured_error = structured_error
        self.chat_error = chat_error
        self.structured_calls = []
        self.chat_calls = []

    def generate_structured(self, parts, schema, temperature=0.1):
        self.structured_calls.append({"parts": list(parts), "schema": schema, "temperature": temperature})
        if self.structured_error:
            raise self.structured_error
        return self.structured_text

    def chat(self, system_instruction, history, message):
        self.chat_calls.append({"system_instruction": system_instruction, "history": list(history), "message": message})
        if self.chat_error:
            raise self.chat_error
        return self.chat_text


FAKE_HWP5TXT = textwrap.dedent('''
    import sys
    import time

    args = sys.argv[1:]
    output_path = args[args.index("--output") + 1]
    input_path = args[-1]
    with open(input_path, "rb") as f:
        data = f.read()

    if b"FAIL" in data:
        sys.stderr.write("hwp5txt: not an HWP5 file")
        sys.exit(2)
    if b"SLEEP" in data:
        time.sleep(10)
    if b"NOOUT" in data:
        sys.exit(0)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write("HWP-MARKER " + data.decode("utf-8", "replace"))
''')


def encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def make_docx(*paragraphs, table_rows=None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def make_corrupt_table_docx() -> bytes:
    """A DOCX that opens cleanly but whose table cell XML is invalid"""
    source = zipfile.ZipFile(io.BytesIO(make_docx("intro", table_rows=[["a", "b"]])))
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as target:
        for item in source.infolist():
            content = source.read(item.filename)
            if item.filename == "word/document.xml":
                content = content.replace(b"<w:tcPr>", b'<w:tcPr><w:gridSpan w:val="abc"/>', 1)
            target.writestr(item, content)
    return buffer.getvalue()


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def fake_hwp5txt(tmp_path):
    script = tmp_path / "fake_hwp5txt.py"
    script.write_text(FAKE_HWP5TXT, encoding="utf-8")
    return f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"


@pytest.fixture
def settings(tmp_path, scratch_dir, fake_hwp5txt):
    return Settings(
        gemini_api_key="test-key",
        hwp5txt_command=fake_hwp5txt,
        temp_dir=str(scratch_dir),
        static_dir=str(tmp_path / "dist"),
    )


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def client(fake_backend, settings):
    return TestClient(create_app(backend=fake_backend, settings=settings))


def leftover_artifacts(directory):
    return sorted(p.name for p in directory.glob("govdoc_*"))
