import datetime
import json
import pathlib
import random

import pytest

import logo_engrave_pdf as lep
import logo_engrave_pdf.cli
import logo_engrave_pdf.config
import logo_engrave_pdf.errors
import logo_engrave_pdf.inspect_pdf
import logo_engrave_pdf.issue
import logo_engrave_pdf.placement
import logo_engrave_pdf.template_lib

import conftest


NOW = datetime.datetime(2026, 1, 9, 10, 0, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=9)))
SAMPLE_PLACEMENT = lep.config.DesignPlacement(x=834, y=1247, w=252, h=126)


#============================================
def _issue(template, logo_png: bytes, placement=SAMPLE_PLACEMENT, existing_ids=None):
	return lep.issue.issue_design(
		template,
		logo_png,
		lep.config.LogoSettings(),
		placement,
		existing_ids or set(),
		file_name="acme.png",
		rng=random.Random(3),
		now=NOW,
	)


#============================================
def test_issue_design_builds_record_and_pdfs(sample_template, logo_png: bytes) -> None:
	"""
	Issuing yields a dated ID, a capped logo, and both PDFs.
	"""
	issued = _issue(sample_template, logo_png)
	design = issued.design
	assert design.design_id.startswith("260109_")
	assert design.template_key == "certificate_cover_a4_v1"
	assert design.created_at == "2026-01-09T10:00:00+09:00"
	assert design.logo.file_name == "acme.png"
	assert design.logo.mime_type == "image/png"
	assert design.logo.size_bytes == len(logo_png)
	assert design.placement == SAMPLE_PLACEMENT
	assert lep.issue.base_logo_size(issued.processed_logo) == lep.config.BaseLogoSize(w=252, h=126)

	confirm = lep.inspect_pdf.read_pdf_summary(issued.confirm_pdf)
	assert design.design_id in "\n".join(confirm.lines)
	engrave = lep.inspect_pdf.read_pdf_summary(issued.engrave_pdf)
	assert f"Created at: {design.created_at}" in "\n".join(engrave.lines)


#============================================
def test_issue_design_caps_rotated_logo(sample_template, logo_png: bytes) -> None:
	"""
	A quarter-turned placement caps the unrotated logo with swapped sides.
	"""
	placement = lep.config.DesignPlacement(x=900, y=1230, w=120, h=160, rotation_deg=90)
	issued = _issue(sample_template, logo_png, placement)
	assert lep.issue.base_logo_size(issued.processed_logo) == lep.config.BaseLogoSize(w=160, h=80)


#============================================
def test_issue_design_skips_existing_ids(sample_template, logo_png: bytes) -> None:
	first = _issue(sample_template, logo_png).design.design_id
	second = _issue(sample_template, logo_png, existing_ids={first}).design.design_id
	assert second != first


#============================================
def test_issue_design_rejects_outside_placement(sample_template, logo_png: bytes) -> None:
	placement = lep.config.DesignPlacement(x=1000, y=1247, w=252, h=126)
	with pytest.raises(lep.errors.ValidationError, match="outside the engraving area"):
		_issue(sample_template, logo_png, placement)


#============================================
def test_issue_design_rejects_disallowed_rotation(template_dict: dict, logo_png: bytes) -> None:
	template_dict["placementRules"]["allowRotate"] = False
	template = lep.template_lib.parse_template(template_dict)
	placement = lep.config.DesignPlacement(x=900, y=1230, w=120, h=160, rotation_deg=90)
	with pytest.raises(lep.errors.ValidationError, match="does not allow rotation"):
		_issue(template, logo_png, placement)


#============================================
def test_design_to_dict_wire_shape(sample_template, logo_png: bytes) -> None:
	design = _issue(sample_template, logo_png).design
	record = lep.issue.design_to_dict(design)
	assert record["designId"] == design.design_id
	assert record["logo"]["crop"] == {"x": 0.0, "y": 0.0, "w": 1.0, "h": 1.0}
	assert record["logo"]["transparentLevel"] == "medium"
	assert record["placement"] == {"x": 834, "y": 1247, "w": 252, "h": 126}
	assert record["pdf"]["engraveAssetId"] == f"{design.design_id}-engrave.pdf"
	rotated = lep.config.DesignPlacement(x=1, y=2, w=3, h=4, rotation_deg=270)
	assert lep.issue.placement_to_dict(rotated)["rotationDeg"] == 270


#============================================
@pytest.mark.parametrize(
	"raw",
	[
		{"x": 0, "y": 0, "h": 10},
		{"x": 0, "y": 0, "w": -5, "h": 10},
		{"x": 0, "y": 0, "w": 5, "h": 10, "rotationDeg": 45},
		{"x": True, "y": 0, "w": 5, "h": 10},
		{"x": float("inf"), "y": 0, "w": 5, "h": 10},
	],
)
def test_placement_from_dict_rejects_bad_values(raw: dict) -> None:
	with pytest.raises(lep.errors.ValidationError):
		lep.issue.placement_from_dict(raw)


#============================================
def test_placement_and_crop_from_dict() -> None:
	placement = lep.issue.placement_from_dict({"x": 1, "y": 2, "w": 3, "h": 4, "rotationDeg": 180})
	assert placement == lep.config.DesignPlacement(x=1.0, y=2.0, w=3.0, h=4.0, rotation_deg=180)
	crop = lep.issue.crop_from_dict({"x": 0.25, "y": 0, "w": 0.5, "h": 1})
	assert crop == lep.config.CropRect(x=0.25, y=0.0, w=0.5, h=1.0)
	with pytest.raises(lep.errors.ValidationError):
		lep.issue.crop_from_dict({"x": 0.5, "y": 0, "w": 0.6, "h": 1})


#============================================
def test_directory_store_round_trip(tmp_path: pathlib.Path, template_dict: dict, logo_png: bytes) -> None:
	"""
	The store serves templates and assets and records issued designs.
	"""
	store = lep.issue.DirectoryDesignStore(tmp_path)
	assert store.list_existing_design_ids() == set()
	with pytest.raises(FileNotFoundError):
		store.get_template("certificate_cover_a4_v1")

	templates_dir = tmp_path / "templates"
	templates_dir.mkdir()
	(templates_dir / "certificate_cover_a4_v1.json").write_text(json.dumps(template_dict), encoding="utf-8")
	template = store.get_template("certificate_cover_a4_v1")

	issued = _issue(template, logo_png)
	record_path = store.save_issued(issued)
	design_id = issued.design.design_id
	assert store.list_existing_design_ids() == {design_id}
	assert json.loads(record_path.read_text(encoding="utf-8"))["designId"] == design_id
	assert store.get_asset_bytes(f"{design_id}-engrave.pdf") == issued.engrave_pdf
	assert store.get_asset_bytes(f"{design_id}-logo.png") == issued.processed_logo
	assert store.get_asset_bytes("missing.pdf") is None


#============================================
def _write_cli_inputs(tmp_path: pathlib.Path, template_dict: dict) -> tuple[pathlib.Path, pathlib.Path]:
	template_path = tmp_path / "template" / "certificate_cover_a4_v1.json"
	template_path.parent.mkdir()
	template_path.write_text(json.dumps(template_dict), encoding="utf-8")
	logo_path = tmp_path / "acme.png"
	logo_path.write_bytes(conftest.build_logo_png())
	return template_path, logo_path


#============================================
def test_cli_pipeline_writes_design(tmp_path: pathlib.Path, template_dict: dict, capsys) -> None:
	"""
	The CLI issues a centered design and a rerun gets a fresh ID.
	"""
	template_path, logo_path = _write_cli_inputs(tmp_path, template_dict)
	output_dir = tmp_path / "store"
	argv = [str(logo_path), "-t", str(template_path), "-o", str(output_dir)]

	issued = lep.cli.run_pipeline(lep.cli.parse_args(argv))
	design_id = issued.design.design_id
	output = capsys.readouterr().out
	assert f"Design ID: {design_id}" in output
	assert "Background not found" in output

	record = json.loads((output_dir / "designs" / f"{design_id}.json").read_text(encoding="utf-8"))
	assert record["logo"]["fileName"] == "acme.png"
	assert record["placement"]["x"] == pytest.approx(834)
	assert record["placement"]["w"] == pytest.approx(252)
	assert (output_dir / "assets" / f"{design_id}-confirm.pdf").is_file()
	assert (output_dir / "assets" / f"{design_id}-engrave.pdf").is_file()

	rerun = lep.cli.run_pipeline(lep.cli.parse_args(argv))
	assert rerun.design.design_id != design_id
	assert len(list((output_dir / "designs").glob("*.json"))) == 2


#============================================
def test_cli_clamps_requested_placement(tmp_path: pathlib.Path, template_dict: dict) -> None:
	template_path, logo_path = _write_cli_inputs(tmp_path, template_dict)
	argv = [
		str(logo_path),
		"-t", str(template_path),
		"-o", str(tmp_path / "store"),
		"-p", "1000,1247,252,126",
		"-c", "0,0,1,1",
		"-l", "strong",
		"-m",
	]
	issued = lep.cli.run_pipeline(lep.cli.parse_args(argv))
	assert issued.design.placement.x == pytest.approx(848)
	assert issued.design.logo.settings.monochrome is True
	assert issued.design.logo.settings.transparent_level == "strong"


#============================================
def test_cli_rotation_uses_rotated_footprint(tmp_path: pathlib.Path, template_dict: dict) -> None:
	template_path, logo_path = _write_cli_inputs(tmp_path, template_dict)
	argv = [str(logo_path), "-t", str(template_path), "-o", str(tmp_path / "store"), "-r", "90"]
	placement = lep.cli.run_pipeline(lep.cli.parse_args(argv)).design.placement
	assert placement.rotation_deg == 90
	assert placement.h == pytest.approx(placement.w * 2)
	assert lep.placement.is_inside_area(placement, lep.config.EngravingArea(x=820, y=1220, w=280, h=180))


#============================================
def test_parse_rect_rejects_bad_input() -> None:
	with pytest.raises(SystemExit):
		lep.cli.parse_args(["logo.png", "-t", "t.json", "-o", "out", "-p", "1,2,3"])


#============================================
def test_cli_reports_placement_that_cannot_fit(tmp_path: pathlib.Path, template_dict: dict, capsys) -> None:
	"""
	A quarter-turned placement taller than the area is reported, not issued.
	"""
	template_path, logo_path = _write_cli_inputs(tmp_path, template_dict)
	output_dir = tmp_path / "store"
	argv = [
		str(logo_path),
		"-t", str(template_path),
		"-o", str(output_dir),
		"-p", "850,1230,200,100",
		"-r", "90",
	]
	assert lep.cli.run_pipeline(lep.cli.parse_args(argv)) is None
	output = capsys.readouterr().out
	assert "Design not issued:" in output
	assert "outside the engraving area" in output
	assert lep.issue.DirectoryDesignStore(output_dir).list_existing_design_ids() == set()
