import pytest

from kube_plex.config import Config
from kube_plex.env import SecretRef


@pytest.fixture
def environ():
    return {
        "DATA_PVC": "plex-data",
        "CONFIG_PVC": "plex-config",
        "TRANSCODE_PVC": "plex-transcode",
        "KUBE_NAMESPACE": "media",
        "PMS_IMAGE": "plexinc/pms-docker:1.40.0",
        "PMS_INTERNAL_ADDRESS": "http://plex.media.svc:32400",
        "PLEX_CLAIM_SECRET_NAME": "plex-claim",
        "PLEX_CLAIM_SECRET_KEY": "token",
    }


@pytest.fixture
def config():
    return Config(
        data_claim="plex-data",
        config_claim="plex-config",
        transcode_claim="plex-transcode",
        namespace="media",
        image="plexinc/pms-docker:1.40.0",
        internal_address="http://plex.media.svc:32400",
        claim_secret=SecretRef("plex-claim", "token"),
    )
