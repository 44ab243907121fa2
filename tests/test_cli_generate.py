import json
from unittest.mock import patch

import pytest

from paystub_generator.cli.generate import main as generate_main
from paystub_generator.payload import write_document


def run_cli(args):
    with patch("sys.argv", ["paystub-generate", *args]):
        try:
            generate_main()
        except SystemExit as e:
            return e.code
    return 0


@pytest.mark.e2e
def test_generate_cli_pipeline(tmp_path, small_document, capsys):
    """
    Writes a stub document, runs the CLI with --out-dir and --json, and checks
    both the printed summary and the exported PDF.
    """
    document_path = tmp_path / "stub.json"
    write_document(document_path, small_document)
    out_dir = tmp_path / "out"

    code = run_cli([str(document_path), "--out-dir", str(out_dir), "--json"])

    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["totals"] == {"earnings": 300.5, "mileage": 12.4, "net": 312.9}
    assert summary["file_name"] == "Jane_Doe_stub_2024-05-31.pdf"
    assert summary["page_count"] == 1
    assert (out_dir / "Jane_Doe_stub_2024-05-31.pdf").exists()


@pytest.mark.e2e
def test_generate_cli_human_output_for_legacy_document(tmp_path, legacy_payload, capsys):
    document_path = tmp_path / "legacy.json"
    document_path.write_text(json.dumps(legacy_payload), encoding="utf-8")

    code = run_cli([str(document_path)])

    assert code == 0
    out = capsys.readouterr().out
    assert "Gross Earnings: $25.00" in out
    assert "+ Mileage: $6.00" in out
    assert "Net Pay: $31.00" in out


@pytest.mark.e2e
def test_generate_cli_config_changes_rate(tmp_path, current_payload, capsys):
    document_path = tmp_path / "stub.json"
    document_path.write_text(json.dumps(current_payload), encoding="utf-8")
    config_path = tmp_path / "settings.json"
    config_path.write_text(json.dumps({"mile_rate": "0.5"}), encoding="utf-8")

    code = run_cli([str(document_path), "--config", str(config_path), "--json"])

    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["totals"] == {"earnings": 5.0, "mileage": 15.0, "net": 20.0}


@pytest.mark.e2e
def test_generate_cli_missing_file(tmp_path):
    code = run_cli([str(tmp_path / "nope.json")])
    assert "File not found" in str(code)


@pytest.mark.e2e
def test_generate_cli_invalid_document(tmp_path):
    document_path = tmp_path / "bad.json"
    document_path.write_text(json.dumps({"schema_version": "1.0.0", "items": "oops"}), encoding="utf-8")
    code = run_cli([str(document_path)])
    assert "Invalid stub document" in str(code)


@pytest.mark.e2e
def test_generate_cli_refuses_overwrite_when_not_interactive(tmp_path, small_document):
    document_path = tmp_path / "stub.json"
    write_document(document_path, small_document)
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / "Jane_Doe_stub_2024-05-31.pdf").write_bytes(b"existing")

    with patch("paystub_generator.utils.console.is_interactive", return_value=False):
        code = run_cli([str(document_path), "--out-dir", str(out_dir)])

    assert "Refusing to overwrite" in str(code)
    assert (out_dir / "Jane_Doe_stub_2024-05-31.pdf").read_bytes() == b"existing"

    assert run_cli([str(document_path), "--out-dir", str(out_dir), "--force", "--json"]) == 0
    assert (out_dir / "Jane_Doe_stub_2024-05-31.pdf").read_bytes().startswith(b"%PDF")


@pytest.mark.e2e
def test_generate_cli_export_failure_exits_nonzero(tmp_path, small_document):
    document_path = tmp_path / "stub.json"
    write_document(document_path, small_document)

    with patch("paystub_generator.export.paginate", side_effect=RuntimeError("boom")):
        code = run_cli([str(document_path), "--out-dir", str(tmp_path / "out")])

    assert code == 1
