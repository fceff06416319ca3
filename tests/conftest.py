"""Shared fixtures: a stand-in `mvn` executable replaying a recorded build."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

FAKE_MVN = """#!{python}
import shutil
import sys
from pathlib import Path

here = Path(__file__).parent
args = sys.argv[1:]
if "dependency:tree" in args:
    target = next(a.split("=", 1)[1] for a in args if a.startswith("-DoutputFile="))
    shutil.copyfile(here / "tree.dot", target)
sys.stdout.buffer.write((here / "build.log").read_bytes())
sys.stdout.flush()
sys.exit({exit_code})
"""

MAVEN_LOG = (
    b"[INFO] Scanning for projects...\n"
    b"[INFO] Building in C:\\Users\\J\xf6rg:x:y:z\n"
    b"[INFO] \n"
    b"[INFO] --------------------------< com.example:app >--------------------------\n"
    b"[INFO] Building app 1.0.0\n"
    b"[INFO] --------------------------------[ jar ]---------------------------------\n"
    b"[INFO] \n"
    b"[INFO] --- maven-dependency-plugin:3.6.1:list (default-cli) @ app ---\n"
    b"[INFO] \n"
    b"[INFO] The following files have been resolved:\n"
    b"[INFO]    com.example:foo:jar:1.2.3:compile\n"
    b"[INFO]    com.x:bar:jar:2.0:compile\n"
    b"[INFO]    org.hamcrest:hamcrest-core:jar:1.3:test -- module org.hamcrest.core [auto]\n"
    b"[INFO]    com.x:bar:jar:2.0:compile\n"
    b"[INFO] \n"
    b"[INFO] ------------------------------------------------------------------------\n"
    b"[INFO] BUILD SUCCESS\n"
    b"[INFO] ------------------------------------------------------------------------\n"
    b"[INFO] Total time:  1.234 s\n"
    b"[INFO] Finished at: 2024-01-01T00:00:00Z\n"
    b"[INFO] ------------------------------------------------------------------------\n"
)

TREE_DOT = """digraph "com.example:app:jar:1.0.0" {
	"com.example:app:jar:1.0.0" -> "com.example:foo:jar:1.2.3:compile" ;
	"com.example:app:jar:1.0.0" -> "com.x:bar:jar:2.0:compile" ;
	"com.x:bar:jar:2.0:compile" -> "org.hamcrest:hamcrest-core:jar:1.3:test" ;
 }
"""

needs_posix_tools = pytest.mark.skipif(
    sys.platform == "win32" or not all(shutil.which(t) for t in ("grep", "cut", "sort")),
    reason="needs a POSIX shell toolchain (grep, cut, sort)",
)


@pytest.fixture
def fake_maven(tmp_path: Path):
    """Return a factory writing an executable `mvn` that prints log and writes dot."""

    def make(log: bytes = MAVEN_LOG, dot: str = TREE_DOT, exit_code: int = 0) -> str:
        bin_dir = tmp_path / "fake-maven"
        bin_dir.mkdir(exist_ok=True)
        (bin_dir / "build.log").write_bytes(log)
        (bin_dir / "tree.dot").write_text(dot)
        script = bin_dir / "mvn"
        script.write_text(FAKE_MVN.format(python=sys.executable, exit_code=exit_code))
        script.chmod(0o755)
        return str(script)

    return make
