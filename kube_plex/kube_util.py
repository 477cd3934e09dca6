import structlog
import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException
from urllib3.exceptions import HTTPError

from .env import EnvEntry
from .errors import CleanupError, ConfigurationError, PollError, SubmissionError
from .job import JobHandle, JobSpec, Phase

CONTAINER_NAME = "plex"

logger = structlog.get_logger()


def load_core_api() -> client.CoreV1Api:
    try:
        config.load_incluster_config()
    except ConfigException:
        try:
            config.load_kube_config()
        except ConfigException as e:
            raise ConfigurationError(f"no Kubernetes cluster configured: {e}") from e

    return client.CoreV1Api()


def to_env_var(entry: EnvEntry) -> client.V1EnvVar:
    if entry.secret is None:
        return client.V1EnvVar(name=entry.name, value=entry.value)

    return client.V1EnvVar(
        name=entry.name,
        value_from=client.V1EnvVarSource(
            secret_key_ref=client.V1SecretKeySelector(
                name=entry.secret.name, key=entry.secret.key
            )
        ),
    )


def to_pod(spec: JobSpec) -> client.V1Pod:
    mounts = [
        client.V1VolumeMount(name=v.name, mount_path=v.mount_path, read_only=v.read_only)
        for v in spec.volumes
    ]
    volumes = [
        client.V1Volume(
            name=v.name,
            persistent_volume_claim=client.V1PersistentVolumeClaimVolumeSource(
                claim_name=v.claim
            ),
        )
        for v in spec.volumes
    ]

    container = client.V1Container(
        name=CONTAINER_NAME,
        image=spec.image,
        command=list(spec.command),
        env=[to_env_var(e) for e in spec.env],
        working_dir=spec.working_dir,
        volume_mounts=mounts,
    )

    return client.V1Pod(
        api_version="v1",
        kind="Pod",
        metadata=client.V1ObjectMeta(generate_name=spec.generate_name),
        spec=client.V1PodSpec(
            node_selector=dict(spec.node_selector),
            restart_policy="Never",
            containers=[container],
            volumes=volumes,
        ),
    )


def manifest_yaml(pod: client.V1Pod) -> str:
    body = client.ApiClient().sanitize_for_serialization(pod)

    # Names only, values may hold credentials
    for container in body["spec"]["containers"]:
        container["env"] = [e["name"] for e in container.get("env", [])]

    return yaml.safe_dump(body, sort_keys=False)


class PodManifest:
    # Rendered only when a log line containing it is actually written
    def __init__(self, pod: client.V1Pod):
        self.pod = pod

    def __repr__(self) -> str:
        return manifest_yaml(self.pod)

    __str__ = __repr__


def parse_phase(phase: str | None) -> Phase:
    # A freshly created pod may not report a phase yet
    if phase is None:
        return Phase.PENDING

    try:
        return Phase(phase)
    except ValueError:
        return Phase.UNKNOWN


class PodClient:
    def __init__(self, api: client.CoreV1Api):
        self.api = api

    def create(self, spec: JobSpec, timeout: float) -> JobHandle:
        pod = to_pod(spec)
        logger.debug("pod_manifest", manifest=PodManifest(pod))

        try:
            created = self.api.create_namespaced_pod(
                namespace=spec.namespace, body=pod, _request_timeout=timeout
            )
        except (ApiException, HTTPError) as e:
            raise SubmissionError(spec.namespace, str(e)) from e

        return JobHandle(created.metadata.namespace or spec.namespace, created.metadata.name)

    def get_phase(self, handle: JobHandle, timeout: float) -> Phase:
        try:
            pod = self.api.read_namespaced_pod(
                name=handle.name, namespace=handle.namespace, _request_timeout=timeout
            )
        except (ApiException, HTTPError) as e:
            raise PollError(handle.name, str(e)) from e

        return parse_phase(pod.status.phase if pod.status else None)

    def delete(self, handle: JobHandle, timeout: float) -> None:
        try:
            self.api.delete_namespaced_pod(
                name=handle.name, namespace=handle.namespace, _request_timeout=timeout
            )
        except ApiException as e:
            if e.status == 404:
                logger.warning("pod_already_gone", pod=str(handle))
                return
            raise CleanupError(handle.namespace, handle.name, str(e)) from e
        except HTTPError as e:
            raise CleanupError(handle.namespace, handle.name, str(e)) from e
