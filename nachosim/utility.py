"""Small helpers shared by the simulator: rounding division and path splitting."""

BITS_IN_BYTE = 8
BITS_IN_WORD = 32


def div_round_down(n: int, s: int) -> int:
    """Divide `n` by `s`, rounding down."""
    return n // s


def div_round_up(n: int, s: int) -> int:
    """Divide `n` by `s`, rounding up."""
    return n // s + (1 if n % s > 0 else 0)


def sep_path(path: str) -> tuple[str, str]:
    """Split `path` into its directory part and its final name.

    The directory part keeps its trailing slash; it is empty when `path`
    holds no slash at all.
    """
    cut = path.rfind("/")
    if cut == -1:
        return "", path
    return path[: cut + 1], path[cut + 1 :]


def get_file_path(path: str) -> tuple[str, str]:
    """Split off the first component of `path`.

    Returns the text before the first slash and the text after it.  When
    there is no slash, the rest is empty.
    """
    first, sep, rest = path.partition("/")
    return first, rest if sep else ""