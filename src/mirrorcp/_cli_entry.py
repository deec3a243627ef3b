"""Console-script entry point for ``mirrorcp``.

click is an optional dependency (the ``cli`` extra), so it is imported
only here and a missing install is reported as a one-line hint instead
of a traceback.
"""

import sys

EXIT_INTERRUPTED = 130


def main(argv=None):
    try:
        from .cli import main as cli_main
    except ModuleNotFoundError as exc:
        if exc.name != "click":
            raise
        sys.stderr.write("mirrorcp: the command line needs click; "
                         "install it with 'pip install mirrorcp[cli]'\n")
        sys.exit(1)
    try:
        cli_main(args=argv, prog_name="mirrorcp")
    except KeyboardInterrupt:
        sys.stderr.write("mirrorcp: interrupted\n")
        sys.exit(EXIT_INTERRUPTED)
