from collections.abc import Iterable
from dataclasses import dataclass

# Never forwarded in plain text, re-added as a secret reference instead
CLAIM_VAR = "PLEX_CLAIM"


@dataclass(frozen=True)
class SecretRef:
    name: str
    key: str


@dataclass(frozen=True)
class EnvEntry:
    name: str
    value: str | None = None
    secret: SecretRef | None = None

    def __post_init__(self):
        if (self.value is None) == (self.secret is None):
            raise ValueError(f"env entry {self.name!r} needs exactly one of value or secret")


def parse(var: str) -> EnvEntry:
    name, _, value = var.partition("=")
    return EnvEntry(name, value)


def from_environ(environ: dict[str, str]) -> list[str]:
    return [f"{k}={v}" for k, v in environ.items()]


def rewrite_env(env: Iterable[str], reserved: Iterable[str] = (CLAIM_VAR,)) -> list[EnvEntry]:
    drop = set(reserved)
    entries: dict[str, EnvEntry] = {}

    for var in env:
        entry = parse(var)
        if entry.name in drop:
            continue

        # A repeated name keeps its first position and takes the last value
        entries[entry.name] = entry

    return list(entries.values())


def secret_entry(name: str, ref: SecretRef) -> EnvEntry:
    return EnvEntry(name, secret=ref)
