import os
import stat
import sys

import pytest

_FAKE_PANDOC_BODY = '''
import json
import os
import sys

args = sys.argv[1:]
if "--version" in args:
    print("pandoc 3.1.9")
    print("Features: +server +lua")
    sys.exit(0)

log = os.environ.get("FAKE_PANDOC_LOG")
if log:
    with open(log, "w", encoding="utf-8") as f:
        json.dump(args, f)

out = args[args.index("-o") + 1]
src = [a for a in args if not a.startswith("-") and a != out][-1]
with open(src, "rb") as f:
    data = f.read()
with open(out, "wb") as f:
    f.write(data if EXIT_CODE == 0 else data[:10])
if EXIT_CODE:
    sys.stderr.write("Error at (line 3, column 1): unexpected end of input\\n")
sys.exit(EXIT_CODE)
'''


def _write_fake_pandoc(directory, exit_code):
    path = directory / ("pandoc-fail" if exit_code else "pandoc")
    path.write_text(f"#!{sys.executable}\nEXIT_CODE = {exit_code}\n" + _FAKE_PANDOC_BODY, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def fake_pandoc(tmp_path):
    """Executable standing in for pandoc: copies the input file to -o."""
    if os.name == "nt":
        pytest.skip("fake pandoc needs a POSIX shebang")
    bindir = tmp_path / "bin"
    bindir.mkdir()
    return _write_fake_pandoc(bindir, 0)


@pytest.fixture
def failing_pandoc(tmp_path):
    """Like fake_pandoc, but writes a truncated output and exits 1."""
    if os.name == "nt":
        pytest.skip("fake pandoc needs a POSIX shebang")
    bindir = tmp_path / "bin-fail"
    bindir.mkdir()
    return _write_fake_pandoc(bindir, 1)


@pytest.fixture
def isolated_tempdir(tmp_path, monkeypatch):
    """Route tempfile into an empty directory so leftovers are visible."""
    import tempfile

    d = tmp_path / "tmp"
    d.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(d))
    return d


SAMPLE_TEX = r"""\documentclass{article}
\usepackage{vestnik}
\begin{document}
\udc{94(510)}
\articletitleru{Китай и Россия — история}
\authorru{И. И. Иванов}
\abstractru{Статья посвящена истории.}
\articletitleen{China and Russia}
\abstracten{The article deals with history.}
\section{Введение}
Текст 1990–2000 годов.
\bibliographyru
\begin{bibliolist}
\item Иванов И. И. Книга. М., 2000.
\end{bibliolist}
\end{document}
"""


@pytest.fixture
def sample_tex(tmp_path):
    path = tmp_path / "article.tex"
    path.write_text(SAMPLE_TEX, encoding="utf-8")
    return path
