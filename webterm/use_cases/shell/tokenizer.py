SCRIPT_PREFIX = "./"


def split_line(raw_line: str) -> list[str]:
    """Split a command line on whitespace runs; no quoting or escaping."""
    return raw_line.split()


def tokenize(raw_line: str) -> tuple[str, list[str]]:
    """Split a command line into (command name, arguments).

    The command name is lowercased; arguments are kept verbatim. A leading
    "./name" token becomes the "./" command with "name" as first argument so
    the script name keeps its case.
    """
    parts = split_line(raw_line)
    if not parts:
        return "", []
    head = parts[0]
    if head.startswith(SCRIPT_PREFIX) and len(head) > len(SCRIPT_PREFIX):
        return SCRIPT_PREFIX, [head[len(SCRIPT_PREFIX) :], *parts[1:]]
    return head.lower(), parts[1:]
