import sys


BLACK = "\033[30m"
RED = "\033[31m"
GREEN = "\033[32m"
BLUE = "\033[34m"
CYAN = "\033[36m"
WHITE = "\033[37m"
YELLOW = "\033[33m"

BOLD = "\033[1m"
FAINT = "\033[2m"
UNDERLINE = "\033[4m"
RESET = "\033[0m"


def wordwrap(text: str, width: int = 60, newline: str = "\n") -> str:
    result = ""
    curr = 0

    for c in text:
        if c == " " and curr > width:
            result += newline
            curr = 0
        else:
            result += c
            curr += 1

    return result


def indent(text: str, indent: int = 4) -> str:
    return " " * indent + text.replace("\n", "\n" + " " * indent)


def title(text: str):
    print(f"{BOLD+WHITE+UNDERLINE}{text}{RESET}")


def subtitle(text: str):
    print(f"{BOLD+WHITE}{text}{RESET}:")


def p(text: str):
    return indent(wordwrap(text))


def error(msg: str) -> None:
    print(f"{RED}Error:{RESET} {msg}", file=sys.stderr)

