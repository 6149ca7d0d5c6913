
VERSION = (0, 1, 0)
VERSION_STR = f"{VERSION[0]}.{VERSION[1]}.{VERSION[2]}{'-' +  str(VERSION[-1]) if len(VERSION) > 3 else ''}"


ARGV0 = "shargs"
DESCRIPTION = "Consistent command-line argument parsing, in the style of a bash _parse_args"

HELP_SHORT = ("h", "?")
HELP_LONG = ("help",)
SEPARATOR = "--"

# Help is a request, not an error, but it still exits nonzero.
HELP_EXIT_CODE = 1
ERROR_EXIT_CODE = 1

EXTRA_ARGS_ENV = "SHARGS_EXTRA_ARGS"
