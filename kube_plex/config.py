from collections.abc import Mapping
from dataclasses import dataclass

from .env import SecretRef
from .errors import ConfigurationError

REQUIRED_VARS = (
    "DATA_PVC",
    "CONFIG_PVC",
    "TRANSCODE_PVC",
    "KUBE_NAMESPACE",
    "PMS_IMAGE",
    "PMS_INTERNAL_ADDRESS",
    "PLEX_CLAIM_SECRET_NAME",
    "PLEX_CLAIM_SECRET_KEY",
)


@dataclass(frozen=True)
class Config:
    data_claim: str
    config_claim: str
    transcode_claim: str
    namespace: str
    image: str
    # The server as seen from inside the cluster, e.g. http://plex.media:32400
    internal_address: str
    claim_secret: SecretRef
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "Config":
        missing = [v for v in REQUIRED_VARS if not environ.get(v)]
        if missing:
            raise ConfigurationError(f"missing environment variables: {', '.join(missing)}")

        return cls(
            data_claim=environ["DATA_PVC"],
            config_claim=environ["CONFIG_PVC"],
            transcode_claim=environ["TRANSCODE_PVC"],
            namespace=environ["KUBE_NAMESPACE"],
            image=environ["PMS_IMAGE"],
            internal_address=environ["PMS_INTERNAL_ADDRESS"].rstrip("/"),
            claim_secret=SecretRef(
                environ["PLEX_CLAIM_SECRET_NAME"], environ["PLEX_CLAIM_SECRET_KEY"]
            ),
            log_level=environ.get("KUBE_PLEX_LOG_LEVEL", "INFO").upper(),
        )
