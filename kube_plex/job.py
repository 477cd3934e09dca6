from dataclasses import dataclass
from enum import StrEnum

from .env import EnvEntry


class Phase(StrEnum):
    PENDING = "Pending"
    RUNNING = "Running"
    UNKNOWN = "Unknown"
    FAILED = "Failed"
    SUCCEEDED = "Succeeded"


@dataclass(frozen=True)
class VolumeBinding:
    name: str
    claim: str
    mount_path: str
    read_only: bool


@dataclass(frozen=True)
class JobSpec:
    generate_name: str
    namespace: str
    image: str
    command: tuple[str, ...]
    env: tuple[EnvEntry, ...]
    working_dir: str
    volumes: tuple[VolumeBinding, ...]
    node_selector: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class JobHandle:
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"
