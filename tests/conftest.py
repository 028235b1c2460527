import io
import zipfile
from collections.abc import Callable

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from metadata_ingest.config.settings import Settings


def build_zip(entries: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buf.getvalue()


@pytest.fixture()
def make_zip() -> Callable[[dict[str, str]], bytes]:
    """Build an in-memory zip archive from entry name -> text content."""
    return build_zip


@pytest.fixture()
def settings() -> Settings:
    """Offline settings: example AI provider, no .env file."""
    return Settings(_env_file=None, ai_provider="example")  # type: ignore[call-arg]


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def titled_pdf_bytes() -> bytes:
    """A single-page PDF carrying title and author in its info dictionary."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("quarterly sales review")
    c.setAuthor("Jane Analyst")
    c.drawString(72, 720, "Revenue grew in every region during the third quarter.")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def docx_bytes() -> bytes:
    return build_zip(
        {
            "word/document.xml": (
                '<w:document><w:body>'
                "<w:p><w:r><w:t>Project kickoff notes</w:t></w:r></w:p>"
                '<w:p><w:r><w:t xml:space="preserve">Budget &amp; timeline   agreed.</w:t></w:r></w:p>'
                "</w:body></w:document>"
            ),
            "docProps/core.xml": (
                "<cp:coreProperties>"
                "<dc:title>Kickoff Meeting Minutes</dc:title>"
                "<dc:creator>Sam Lee</dc:creator>"
                "<cp:keywords>kickoff, planning</cp:keywords>"
                "</cp:coreProperties>"
            ),
        }
    )


@pytest.fixture()
def xlsx_bytes() -> bytes:
    return build_zip(
        {
            "xl/sharedStrings.xml": (
                "<sst><si><t>name</t></si><si><t>score</t></si>"
                "<si><t>alice</t></si><si><r><t>bo</t></r><r><t>b</t></r></si></sst>"
            ),
            "xl/worksheets/sheet1.xml": (
                "<worksheet><sheetData>"
                '<row r="1"><c r="A1" t="s"><v>0</v></c><c r="B1" t="s"><v>1</v></c></row>'
                '<row r="2"><c r="A2" t="s"><v>2</v></c><c r="B2"><v>90</v></c></row>'
                '<row r="3"><c r="A3" t="s"><v>3</v></c><c r="B3"><v>75</v></c>'
                '<c r="C3" t="inlineStr"><is><t>late</t></is></c></row>'
                "</sheetData></worksheet>"
            ),
        }
    )


@pytest.fixture()
def pptx_bytes() -> bytes:
    return build_zip(
        {
            "ppt/slides/slide1.xml": (
                "<p:sld><a:t>Roadmap 2025</a:t><a:t>Launch the mobile app</a:t>"
                "<a:t>Q1</a:t></p:sld>"
            ),
            "ppt/slides/slide2.xml": (
                "<p:sld><a:t>Hiring plan</a:t><a:t>Grow the platform team</a:t></p:sld>"
            ),
            "ppt/slides/slide10.xml": "<p:sld><a:t>Appendix</a:t></p:sld>",
        }
    )
