"""Runs the Tofu interpreter on a .tofu file, or in command-line mode. Also uses error handling context manager.
Called from the tofu console script.
"""

import argparse
import sys

from tofu.lang.error import ErrorHandler
from tofu.lang.session import Session
from tofu.lang.shell import Shell


def main(argv=None):
    """Runs Tofu interpreter. Called from tofu console script."""
    assert sys.version_info >= (3, 10), "tofu cannot be run with python < 3.10"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="tofu", description="Tofu interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--tokens", action="store_true", help="print tokens instead of evaluating")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, tokens_only=args.tokens)
            sess.run()

            for result in sess.results:
                print(repr(result) if args.tokens else result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, tokens_only=args.tokens)).cmdloop()


if __name__ == "__main__":
    main()
