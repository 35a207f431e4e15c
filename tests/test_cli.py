import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from minipas import minipas_cli
from minipas.minipas_config import CompilerConfig

VALID_SOURCE = "begin integer a; a := 1 - 2; end"
FATAL_SOURCE = "begin\ninteger a;\na := 1;\ninteger b\nend"


def test_run_minipas_string_input(tmp_config: CompilerConfig) -> None:
    code = minipas_cli.run_minipas(source=VALID_SOURCE, is_string=True, config=tmp_config)
    assert code == minipas_cli.EXIT_OK
    output = Path(tmp_config.output_dir)
    assert sorted(p.name for p in output.iterdir()) == [
        "source.dyd",
        "source.dys",
        "source.err",
        "source.pro",
        "source.var",
    ]
    assert (output / "source.var").read_text() == f"{'a':>16} {'main':>16} 0 integer 1 0\n"


def test_run_minipas_file_input(
    tmp_path: Path, tmp_config: CompilerConfig, factorial_source: str
) -> None:
    source = tmp_path / "fact.pas"
    source.write_text(factorial_source)
    assert minipas_cli.run_minipas(source=str(source), config=tmp_config) == 0


def test_run_minipas_prints_errors(
    tmp_config: CompilerConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    code = minipas_cli.run_minipas(
        source=FATAL_SOURCE, is_string=True, config=tmp_config, print_errors=True
    )
    assert code == minipas_cli.EXIT_ERRORS
    out = capsys.readouterr().out.strip()
    assert out.startswith("Line 4: Expect executions, but got 'integer'")
    assert out.endswith("[FATAL]")


def test_run_minipas_from_token_ledger(
    tmp_config: CompilerConfig, factorial_source: str
) -> None:
    minipas_cli.run_minipas(source=factorial_source, is_string=True, config=tmp_config)
    ledger = tmp_config.output_path(tmp_config.token_file)
    expected = tmp_config.output_path(tmp_config.variable_file).read_text()

    rerun = CompilerConfig(output_dir=tmp_config.output_dir + "-again")
    code = minipas_cli.run_minipas(source=str(ledger), from_tokens=True, config=rerun)
    assert code == 0
    assert rerun.output_path(rerun.variable_file).read_text() == expected


def test_run_minipas_missing_file_raises(tmp_config: CompilerConfig) -> None:
    with pytest.raises(OSError):
        minipas_cli.run_minipas(source="does/not/exist.pas", config=tmp_config)


def test_main_string_mode(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = minipas_cli.main(["-s", "begin write(x); end", "-o", str(tmp_path), "-p"])
    assert code == 1
    assert "Line 1: Undefined variable 'x'" in capsys.readouterr().out
    assert (tmp_path / "source.err").read_text() == "Line 1: Undefined variable 'x'\n"


def test_main_with_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "minipas.json"
    out_dir = tmp_path / "ledgers"
    config_path.write_text(json.dumps({"output_dir": str(out_dir), "error_file": "errors.txt"}))
    code = minipas_cli.main(["-s", VALID_SOURCE, "-c", str(config_path)])
    assert code == 0
    assert (out_dir / "errors.txt").exists()


def test_main_bad_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = tmp_path / "minipas.json"
    config_path.write_text(json.dumps({"bogus": 1}))
    code = minipas_cli.main(["-s", VALID_SOURCE, "-c", str(config_path)])
    assert code == minipas_cli.EXIT_USAGE
    assert "unknown setting 'bogus'" in capsys.readouterr().err


def test_main_missing_source(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = minipas_cli.main([str(tmp_path / "missing.pas"), "-o", str(tmp_path)])
    assert code == minipas_cli.EXIT_USAGE
    assert "minipas:" in capsys.readouterr().err


def test_main_invalid_flag() -> None:
    with pytest.raises(SystemExit) as e:
        minipas_cli.main(["--no-such-flag"])
    assert e.value.code == 2


def test_cli_as_subprocess(tmp_path: Path) -> None:
    source = tmp_path / "prog.pas"
    source.write_text(FATAL_SOURCE)
    proc = subprocess.run(
        [sys.executable, "-m", "minipas.minipas_cli", str(source), "-o", str(tmp_path / "out")],
        capture_output=True,
        text=True,
        env={**os.environ, "PYTHONPATH": str(Path(__file__).resolve().parents[1] / "src")},
    )
    assert proc.returncode == 1
    assert "[FATAL]" in (tmp_path / "out" / "source.err").read_text()
