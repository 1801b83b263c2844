"""
Pytest configuration for local imports and shared sample data.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import PIL.Image
import PIL.ImageDraw
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

# local repo modules
import logo_engrave_pdf.template_lib


#============================================
def build_template_dict() -> dict:
	"""
	Build the sample certificate cover template in its JSON wire shape.
	"""
	return {
		"templateKey": "certificate_cover_a4_v1",
		"name": "Certificate cover A4, bottom right engraving",
		"status": "published",
		"updatedAt": "2026-01-09T10:00:00.000+09:00",
		"background": {
			"fileName": "certificate-cover-a4.png",
			"canvasWidthPx": 1200,
			"canvasHeightPx": 1600,
		},
		"engravingArea": {
			"label": "bottom right",
			"x": 820,
			"y": 1220,
			"w": 280,
			"h": 180,
		},
		"placementRules": {
			"allowRotate": True,
			"keepInsideEngravingArea": True,
			"minScale": 0.1,
			"maxScale": 6.0,
		},
		"logoSettings": {"monochrome": False},
		"pdf": {"pageSize": "A4", "orientation": "portrait", "dpi": 300},
	}


#============================================
def encode_image(image: PIL.Image.Image, image_format: str = "PNG") -> bytes:
	buffer = io.BytesIO()
	image.save(buffer, format=image_format)
	return buffer.getvalue()


#============================================
def build_logo_png(width: int = 600, height: int = 300) -> bytes:
	"""
	Build a white logo with a black block in the middle.
	"""
	image = PIL.Image.new("RGB", (width, height), (255, 255, 255))
	draw = PIL.ImageDraw.Draw(image)
	draw.rectangle((width // 6, height // 6, width - width // 6, height - height // 6), fill=(0, 0, 0))
	return encode_image(image)


@pytest.fixture
def template_dict() -> dict:
	return build_template_dict()


@pytest.fixture
def sample_template():
	return logo_engrave_pdf.template_lib.parse_template(build_template_dict())


@pytest.fixture
def logo_png() -> bytes:
	return build_logo_png()
