"""Secret preflight check.

Before any key is generated for a secret target, the secret itself must
exist; it is provisioned by someone else and awaited here, never created. If
it already holds a complete key, certificate and CA bundle, there is nothing
left to do.
"""

from typing import NamedTuple

from icecream import ic
from kubernetes import client
from rich.markup import escape

from kube_cert_init import console
from kube_cert_init.core.cluster import Cluster
from kube_cert_init.exceptions import ClusterError
from kube_cert_init.models import CA_CRT, TLS_CRT, TLS_KEY
from kube_cert_init.retry import WaitPolicy

REQUIRED_SECRET_KEYS = (TLS_KEY, TLS_CRT, CA_CRT)


class PreflightResult(NamedTuple):
    """Outcome of the secret preflight check.

    Attributes:
        secret: The fetched secret, kept for the in-place update.
        missing: Required keys absent or empty in the secret.

    """

    secret: client.V1Secret
    missing: tuple[str, ...]

    @property
    def complete(self) -> bool:
        """True when the secret already holds every required key."""
        return not self.missing


def missing_secret_keys(secret: client.V1Secret) -> tuple[str, ...]:
    """Return the required keys that are absent or empty in a secret's data."""
    data = secret.data or {}
    return tuple(key for key in REQUIRED_SECRET_KEYS if not data.get(key))


def check_secret(cluster: Cluster, name: str, namespace: str, wait_policy: WaitPolicy) -> PreflightResult:
    """Wait for the target secret and report what it is missing.

    Args:
        cluster: Gateway to the Kubernetes API.
        name: Secret name.
        namespace: Secret namespace.
        wait_policy: Policy for the pause between reads.

    Returns:
        The secret and the required keys it lacks.

    Raises:
        WaitCancelledError: If the wait policy gives up before the secret appears.

    """
    tracker = wait_policy.start()
    while True:
        try:
            secret = cluster.get_secret(name, namespace)
        except ClusterError as e:
            console.warning(f"Unable to read secret ({escape(name)}): {escape(str(e))}")
            secret = None

        if secret is not None:
            break

        console.info(
            f"Secret to store credentials ({escape(name)}) not found; trying again in {wait_policy.interval:g} seconds"
        )
        tracker.wait(f"secret {namespace}/{name}")

    missing = missing_secret_keys(secret)
    ic(missing)
    for key in missing:
        console.step(f"Missing {console.highlight(key)}... continuing to generate keys and certificates")
    return PreflightResult(secret=secret, missing=missing)
