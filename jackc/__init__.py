import logging
from pathlib import Path
from .compile import compile, scan, tokens_to_xml

log = logging.getLogger(__name__)


def jack_files(path):
    path = Path(path)
    if path.is_dir():
        return sorted(path.glob("*.jack"))
    return [path]


def compile_file(path, output_dir=None, tokens=False):
    """Compile ``path`` to a .vm file beside it, or in ``output_dir``.

    The destination is truncated first and closed whether or not the
    class compiles.  SyntaxError propagates.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    directory = path.parent if output_dir is None else Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    if tokens:
        (directory / f"{path.stem}T.xml").write_text(tokens_to_xml(scan(text, str(path))))

    target = directory / f"{path.stem}.vm"
    with open(target, "w") as out:
        compile(text, str(path), out)
    log.info("Compiled %s -> %s", path.name, target)
    return target


def compile_path(path, output_dir=None, tokens=False):
    """Compile a file or every .jack file of a directory; return the number of failures."""
    files = jack_files(path)
    if not files:
        log.error("No .jack files in %s", path)
        return 1

    failures = 0
    for source in files:
        try:
            compile_file(source, output_dir, tokens)
        except SyntaxError as e:
            failures += 1
            log.error("%s:%d:%d: %s", e.filename, e.lineno, e.offset, e.msg)
        except (UnicodeDecodeError, OSError) as e:
            failures += 1
            log.error("%s: %s", source, e)
    return failures
