from typer.testing import CliRunner

from signup_hours.cli.main import app

runner = CliRunner()

CITIES_CSV = """date_with_hour,lat,long,data,visualization,society
3/15/2019 14:00,40.71,-74.01,9,1,1
3/15/2019 14:00,34.05,-118.24,1,9,1
1/24/2019 22:00,35.68,139.69,1,1,9
3/15/2019 14:00,0.0,-30.0,9,1,1
3/15/2019 14:00,51.51,-0.13,4,4,1
"""


def write_csv(tmp_path, text=CITIES_CSV):
    path = tmp_path / "signups.csv"
    path.write_text(text)
    return path


def test_summary_prints_table_and_drops(tmp_path):
    source = write_csv(tmp_path)
    result = runner.invoke(app, ["summary", "--source", str(source)])

    assert result.exit_code == 0, result.output
    assert "Signups per local hour" in result.output
    assert "Unresolved timezone" in result.output
    assert "Peak hour (data)" in result.output
    assert "14:00" in result.output


def test_report_writes_chart(tmp_path):
    source = write_csv(tmp_path)
    out_dir = tmp_path / "charts"
    result = runner.invoke(app, [
        "report",
        "--source", str(source),
        "--output-dir", str(out_dir),
        "--filename", "hours.png",
        "--workers", "2",
    ])

    assert result.exit_code == 0, result.output
    assert (out_dir / "hours.png").exists()


def test_missing_source_exits_with_error(tmp_path):
    result = runner.invoke(app, ["summary", "--source", str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "LoadError" in result.output


def test_parse_threshold_exits_with_error(tmp_path):
    source = write_csv(
        tmp_path,
        "date_with_hour,lat,long,data,visualization,society\n"
        "yesterday,40.71,-74.01,1,2,3\n"
    )
    result = runner.invoke(app, ["summary", "--source", str(source), "--max-parse-error-ratio", "0.5"])
    assert result.exit_code == 1
    assert "ParseErrorThresholdExceeded" in result.output
