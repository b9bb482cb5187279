import sys
import logging
import argparse
from pathlib import Path
from . import compile_path


def main(argv=None):
    parser = argparse.ArgumentParser(prog="jackc", description="Jack to VM compiler")
    parser.add_argument("path", type=Path, help="a .jack file, or a directory of .jack files")
    parser.add_argument("-o", "--output-dir", type=Path,
                        help="write .vm files here instead of next to the sources")
    parser.add_argument("--tokens", action="store_true",
                        help="also write each token stream to <Name>T.xml")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", dest="level", action="store_const",
                           const=logging.DEBUG, default=logging.INFO)
    verbosity.add_argument("-q", "--quiet", dest="level", action="store_const",
                           const=logging.ERROR)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.level, format="%(levelname)s: %(message)s")

    if not args.path.exists():
        parser.error(f"{args.path} does not exist")

    if compile_path(args.path, args.output_dir, args.tokens):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
