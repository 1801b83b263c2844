"""
Read back issued PDFs with pypdf.
"""

# Standard Library
import dataclasses
import io

# PIP3 modules
import pypdf


@dataclasses.dataclass
class PdfSummary:
	page_count: int
	page_width: float
	page_height: float
	lines: list[str]


#============================================
def read_pdf_summary(pdf_bytes: bytes) -> PdfSummary:
	"""
	Summarize an issued PDF: page count, first page size, and text lines.

	Args:
		pdf_bytes: PDF document bytes.

	Returns:
		PdfSummary instance.
	"""
	reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
	page = reader.pages[0]
	box = page.mediabox
	text = page.extract_text() or ""
	lines = [line.strip() for line in text.splitlines() if line.strip()]
	return PdfSummary(
		page_count=len(reader.pages),
		page_width=float(box.width),
		page_height=float(box.height),
		lines=lines,
	)
