from cyber_claims import cli


def test_synthetic_report(capsys, tmp_path):
    out_csv = tmp_path / "out" / "claims.csv"
    code = cli.main(["--n-claims", "300", "--n-companies", "25", "--seed", "7", "--save-dataset", str(out_csv)])

    assert code == 0
    assert out_csv.exists()
    printed = capsys.readouterr().out
    assert "Generating synthetic cyber claims" in printed
    assert "Possible overstatement" in printed
    assert "Year over year" in printed
    assert "Analysis complete" in printed


def test_report_from_csv(capsys, tmp_path):
    path = tmp_path / "claims.csv"
    assert cli.main(["--n-claims", "150", "--n-companies", "10", "--save-dataset", str(path)]) == 0
    capsys.readouterr()

    assert cli.main(["--input", str(path), "--limit", "3"]) == 0
    printed = capsys.readouterr().out
    assert f"Loading claims from {path}" in printed
    assert "Claims:            150" in printed


def test_missing_input_file_exits_with_error(tmp_path, caplog):
    code = cli.main(["--input", str(tmp_path / "missing.csv")])
    assert code == 1
    assert "Analysis failed" in caplog.text


def test_money_formatting():
    assert cli.money(1234567.891) == "1,234,567.89"
    assert cli.money(None) == "n/a"
