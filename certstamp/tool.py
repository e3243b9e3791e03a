"""Command-line UI for certstamp.
"""

import argparse
import json
import logging
import sys
from typing import (
    TYPE_CHECKING, Any, Callable, Optional, Sequence, Type, TypedDict, Union,
)

from .api import (
    FULL_VERSION, ErrorKind, IssuanceError, certificate_to_pem,
    describe_pem, issue_certificate, render_serial,
)
from .compat import TypeAlias

__all__ = ("main", "run_certstamp")

QUIET = False

# exit codes by failure kind
EXIT_CODES = {
    ErrorKind.MALFORMED_INPUT: 1,
    ErrorKind.IDENTIFIER_GENERATION: 2,
    ErrorKind.SIGNING: 3,
}

# pylint: disable=protected-access
if TYPE_CHECKING:
    SubParser: TypeAlias = argparse._SubParsersAction[argparse.ArgumentParser]
else:
    SubParser: TypeAlias = argparse._SubParsersAction
GParser: TypeAlias = Union[argparse.ArgumentParser, argparse._ArgumentGroup]


#
# Command-line UI
#


def die(txt: str, *args: Any, code: int = 1) -> None:
    """Print message and exit.
    """
    if args:
        txt = txt % args
    sys.stderr.write(txt + "\n")
    sys.exit(code)


def msg(txt: str, *args: Any) -> None:
    """Print message to stderr.
    """
    if QUIET:
        return
    if args:
        txt = txt % args
    sys.stderr.write(txt + "\n")


def read_input(fn: str) -> bytes:
    """Read file, "-" means stdin.
    """
    if fn == "-":
        return sys.stdin.buffer.read()
    with open(fn, "rb") as f:
        return f.read()


def write_output(data: str, out: Optional[str]) -> None:
    if out:
        with open(out, "w", encoding="ascii") as f:
            f.write(data)
    else:
        sys.stdout.write(data)
        sys.stdout.flush()


def fail(ex: IssuanceError) -> None:
    die("ERROR: %s", str(ex), code=EXIT_CODES[ex.kind])


def sign_command(args: argparse.Namespace) -> None:
    """Load request, key and issuer cert, output signed cert.
    """
    if not args.self_sign and not args.ca_info:
        die("Need --ca-info or --self-sign")

    try:
        csr_data = read_input(args.request)
        key_data = read_input(args.key)
        issuer_data = None
        if not args.self_sign:
            issuer_data = read_input(args.ca_info)
    except OSError as ex:
        die("ERROR: %s", str(ex))
        return

    try:
        cert = issue_certificate(csr_data, key_data, issuer_data, self_sign=args.self_sign)
    except IssuanceError as ex:
        fail(ex)
        return

    if args.self_sign:
        msg("Self-signed: %s", args.request)
    else:
        msg("Signed by %s: %s", args.ca_info, args.request)
    msg("Serial: %s", render_serial(cert.serial_number))
    write_output(certificate_to_pem(cert), args.out)


def parse_command(args: argparse.Namespace) -> None:
    """Describe certificates as JSON.
    """
    docs = []
    for fn in args.file:
        try:
            data = read_input(fn)
        except OSError as ex:
            die("ERROR: %s", str(ex))
            return
        try:
            info = describe_pem(data)
        except IssuanceError as ex:
            fail(ex)
            return
        docs.append(json.dumps(info, indent=args.indent, sort_keys=True) + "\n")
    write_output("".join(docs), args.out)


#
# argparse setup
#


def opts_output(p: GParser) -> None:
    p.add_argument("--out", metavar="OUT_FILE",
                   help="File to write output to, instead stdout")


def opts_top(p: GParser) -> None:
    p.add_argument("-V", "--version", action="version", version="%(prog)s " + FULL_VERSION,
                   help="Show version and exit")
    p.add_argument("-q", "--quiet", action="store_true",
                   help="Be quiet")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="Show log messages, repeat for debug output")


class CustomFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=26)


class HelpArgs(TypedDict):
    help: str
    description: str
    formatter_class: Type[argparse.HelpFormatter]


def loadhelp(func: Callable[..., None]) -> HelpArgs:
    """Convert docstring to add_parser() args
    """
    doc = (func.__doc__ or "").strip()
    return {
        "help": doc,
        "description": doc,
        "formatter_class": CustomFormatter,
    }


def setup_args_sign(sub: SubParser) -> None:
    """Issue certificate (CRT) for certificate request (CSR)
    """
    p = sub.add_parser("sign", **loadhelp(setup_args_sign))
    p.set_defaults(command=sign_command)

    g = p.add_argument_group("Output")
    opts_output(g)

    g = p.add_argument_group("Signing")
    g.add_argument("--request", metavar="CSR_FILE", required=True,
                   help="Filename of certificate request (CSR) to be signed.")
    g.add_argument("--key", metavar="KEY_FILE", required=True,
                   help="Issuer private key, PKCS#8 PEM.")
    x = g.add_mutually_exclusive_group()
    x.add_argument("--ca-info", metavar="CRT_FILE",
                   help="Filename of issuer certificate.")
    x.add_argument("--self-sign", action="store_true",
                   help="Sign request with its own key.")


def setup_args_parse(sub: SubParser) -> None:
    """Show certificate fields as JSON
    """
    p = sub.add_parser("parse", **loadhelp(setup_args_parse))
    p.set_defaults(command=parse_command)

    g = p.add_argument_group("Output")
    opts_output(g)
    g.add_argument("--indent", type=int, default=None, metavar="N",
                   help="Pretty-print JSON with N spaces")

    p.add_argument("file", help="Certificate file(s), - for stdin", nargs="+")


#
# top-level parser
#


def setup_args() -> argparse.ArgumentParser:
    """Create ArgumentParser
    """
    top = argparse.ArgumentParser(
        prog="certstamp",
        description="Run any COMMAND with --help switch to get command-specific help.",
        allow_abbrev=False,
        formatter_class=CustomFormatter,
    )
    opts_top(top)

    sub = top.add_subparsers(metavar="COMMAND")
    setup_args_sign(sub)
    setup_args_parse(sub)
    return top


def setup_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose > 1:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")


def run_certstamp(argv: Sequence[str]) -> None:
    """Load arguments, select and run command.
    """
    global QUIET

    args = setup_args().parse_args(argv)
    if not hasattr(args, "command"):
        die("Need command")

    QUIET = bool(args.quiet)
    setup_logging(args.verbose, QUIET)

    args.command(args)


def main() -> None:
    """Command-line application entry point.
    """
    try:
        return run_certstamp(sys.argv[1:])
    except (BrokenPipeError, KeyboardInterrupt):
        sys.exit(1)


if __name__ == "__main__":
    main()
