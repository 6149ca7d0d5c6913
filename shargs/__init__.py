import os
import sys
import logging

from . import (
    args,
    cli,
    const,
    vt100,
)

_logger = logging.getLogger(__name__)


class logger:
    class LoggerArgs:
        verbose: bool = cli.flag(None, "verbose", "Enable verbose logging")

    @staticmethod
    def early(argv: list[str]) -> LoggerArgs:
        """Reads the logging flags ahead of the full parse, so the parser's own logs are visible."""
        res = cli.defaults(logger.LoggerArgs)
        head = argv[: argv.index(const.SEPARATOR)] if const.SEPARATOR in argv else argv
        res.verbose = "--verbose" in head
        return res

    @staticmethod
    def setup(args: LoggerArgs):
        if args.verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format=f"{vt100.CYAN}%(asctime)s{vt100.RESET} {vt100.YELLOW}%(levelname)s{vt100.RESET} %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            logging.basicConfig(
                level=logging.WARNING,
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )


class ExampleArgs:
    aOpt: bool = cli.flag("a", "a-opt", "Enable option A")
    bParam: str = cli.param("b", "b-param", "Value for parameter B")


class RootArgs(ExampleArgs, logger.LoggerArgs):
    pass


def argv() -> list[str]:
    """Returns the arguments to parse, prefixed by any extra arguments from the environment."""
    extra = os.environ.get(const.EXTRA_ARGS_ENV, None)
    return (extra.split() if extra else []) + sys.argv[1:]


def _main(parsed: args.Parsed, opts: RootArgs):
    if opts.aOpt:
        print("a-opt: set")

    if opts.bParam is not None:
        print(f"b-param: {opts.bParam}")

    for operand in parsed.operands:
        _logger.info(f"Processing '{operand}'")
        print(f"positional: {operand}")


def main() -> int:
    schema = cli.Schema.extract(RootArgs)

    try:
        tokens = argv()
        logger.setup(logger.early(tokens))
        result = schema.parse(tokens)

        if isinstance(result, args.Help):
            cli.printHelp(schema, const.ARGV0, const.DESCRIPTION)
            return const.HELP_EXIT_CODE

        if isinstance(result, args.Failure):
            vt100.error(result.message)
            cli.printUsage(schema, const.ARGV0, file=sys.stderr)
            return result.exitCode

        opts: RootArgs = schema.instantiate(result)
        _logger.debug(f"Parsed {result}")
        _main(result, opts)
        return 0

    except KeyboardInterrupt:
        print()
        return 1
