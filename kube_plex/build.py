from collections.abc import Sequence

from .config import Config
from .env import CLAIM_VAR, EnvEntry, secret_entry
from .job import JobSpec, VolumeBinding

GENERATE_NAME = "pms-elastic-transcoder-"

# The transcoder in the server image is only built for amd64
NODE_SELECTOR = (("kubernetes.io/arch", "amd64"),)


def volume_bindings(config: Config) -> tuple[VolumeBinding, ...]:
    return (
        VolumeBinding("data", config.data_claim, "/data", read_only=True),
        VolumeBinding("config", config.config_claim, "/config", read_only=True),
        VolumeBinding("transcode", config.transcode_claim, "/transcode", read_only=False),
    )


def build_job_spec(
    cwd: str, env: Sequence[EnvEntry], args: Sequence[str], config: Config
) -> JobSpec:
    # The claim token goes back in as a secret reference, never as a value
    env_vars = tuple(e for e in env if e.name != CLAIM_VAR)
    env_vars += (secret_entry(CLAIM_VAR, config.claim_secret),)

    return JobSpec(
        generate_name=GENERATE_NAME,
        namespace=config.namespace,
        image=config.image,
        command=tuple(args),
        env=env_vars,
        working_dir=cwd,
        volumes=volume_bindings(config),
        node_selector=NODE_SELECTOR,
    )
