from collections.abc import Sequence

from .errors import ArgumentShapeError

LOOPBACK_ADDRESS = "http://127.0.0.1:32400"
TRANSCODER_LOG_LEVEL = "debug"

URL_FLAGS = frozenset({"-progressurl", "-manifest_name", "-segment_list"})
LOG_LEVEL_FLAGS = frozenset({"-loglevel", "-loglevel_plex"})


def rewrite_value(flag: str, value: str, internal_address: str) -> str:
    if flag in URL_FLAGS:
        return value.replace(LOOPBACK_ADDRESS, internal_address, 1)

    if flag in LOG_LEVEL_FLAGS:
        return TRANSCODER_LOG_LEVEL

    return value


def rewrite_args(args: Sequence[str], internal_address: str) -> list[str]:
    """
    Point the transcoder's callback URLs at the server's cluster address and
    turn its logging up. Returns a new list; args is left untouched.
    """
    out: list[str] = []
    i = 0

    while i < len(args):
        arg = args[i]
        out.append(arg)

        if arg in URL_FLAGS or arg in LOG_LEVEL_FLAGS:
            if i + 1 >= len(args):
                raise ArgumentShapeError(arg, i)

            out.append(rewrite_value(arg, args[i + 1], internal_address))
            i += 2
        else:
            i += 1

    return out
