import os
from pathlib import Path

import pytest

from minipas.minipas_config import CompilerConfig

# Subprocess coverage for CLI runs
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


FACTORIAL_SOURCE = """\
begin
  integer k;
  integer m;
  integer function F(n);
    begin
      integer n;
      if n <= 0 then F := 1
      else F := n * F(n - 1)
    end;
  read(m);
  k := F(m);
  write(k)
end
"""


@pytest.fixture  # type: ignore[misc]
def factorial_source() -> str:
    return FACTORIAL_SOURCE


@pytest.fixture  # type: ignore[misc]
def tmp_config(tmp_path: Path) -> CompilerConfig:
    return CompilerConfig(output_dir=str(tmp_path / "output"))
