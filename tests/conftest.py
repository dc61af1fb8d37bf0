import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


def make_pdf(text=None) -> bytes:
    """Build a one-page PDF whose only content is ``text`` in Helvetica."""
    stream = f"BT /F1 24 Tf 72 700 Td ({text}) Tj ET".encode("latin-1") if text is not None else b""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


class FakeProvider:
    def __init__(self, content=None, exc=None):
        self.content = content
        self.exc = exc
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.exc is not None:
            raise self.exc
        return self.content


SKY_JSON = '{"questions":[{"question":"What color is the sky?","options":["Red","Green","Blue","Yellow"],"correctAnswer":2}]}'


@pytest.fixture
def settings(tmp_path):
    return Settings(api_key="gsk_test_key_1234", uploads_dir=tmp_path / "uploads")


@pytest.fixture
def provider():
    return FakeProvider(content=SKY_JSON)


@pytest.fixture
def client(settings, provider):
    return TestClient(create_app(settings, provider=provider))


@pytest.fixture
def sky_pdf():
    return make_pdf("The sky is blue.")
