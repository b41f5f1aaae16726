"""Provisioner facade.

This module provides the Provisioner class which serves as the main entry
point for a run, coordinating the identity resolver, the key builder, the
signing request client and the output sinks.
"""

from enum import Enum
from typing import NamedTuple

from icecream import ic

from kube_cert_init import console
from kube_cert_init.core.cluster import Cluster
from kube_cert_init.core.signing import SigningRequestClient
from kube_cert_init.delivery import FilesystemSink, SecretSink, check_secret
from kube_cert_init.identity import resolve_subject_alt_names, signing_request_name
from kube_cert_init.keys import build_certificate_request, check_key_size, create_key_material
from kube_cert_init.models import ProvisionConfig, SigningRequest


class Outcome(str, Enum):
    """How a run ended."""

    ISSUED = "issued"
    ALREADY_PROVISIONED = "already-provisioned"


class ProvisionResult(NamedTuple):
    """Summary of a completed run.

    Attributes:
        outcome: Whether a certificate was issued or the secret was already complete.
        request_name: Name of the CertificateSigningRequest.
        common_name: Common Name of the certificate (empty when nothing was issued).
        target: Where the credentials live.

    """

    outcome: Outcome
    request_name: str
    common_name: str
    target: str


class Provisioner:
    """Runs the certificate provisioning flow for one configuration.

    Attributes:
        config: The immutable run configuration.
        cluster: Gateway to the Kubernetes API, created on first use.

    """

    def __init__(self, config: ProvisionConfig, cluster: Cluster | None = None) -> None:
        """Initialize the provisioner.

        Args:
            config: The run configuration.
            cluster: Optional pre-built cluster gateway. If omitted, one is
                created from in-cluster or kubeconfig credentials when the
                run first needs the API.

        """
        self.config = config
        self._cluster = cluster

    @property
    def cluster(self) -> Cluster:
        """The cluster gateway, constructed lazily."""
        if self._cluster is None:
            self._cluster = Cluster()
        return self._cluster

    def run(self) -> ProvisionResult:
        """Provision the workload's serving certificate.

        Names and the key size are checked before anything touches the network or
        generates a key, so configuration errors abort immediately.

        Returns:
            A summary of the run.

        Raises:
            CertInitError: On any unrecoverable failure.

        """
        config = self.config
        identity = config.identity
        request_name = signing_request_name(identity.pod_name, identity.namespace)
        sans = resolve_subject_alt_names(identity)
        check_key_size(config.key_size)
        ic(config)

        preflight = None
        if config.uses_secret:
            preflight = check_secret(self.cluster, config.secret_name, identity.namespace, config.wait)
            if preflight.complete:
                console.success("Secret is present and contains data, nothing to do")
                return ProvisionResult(
                    outcome=Outcome.ALREADY_PROVISIONED,
                    request_name=request_name,
                    common_name="",
                    target=f"{identity.namespace}/{config.secret_name}",
                )

        console.action(f"Generating {config.key_size}-bit RSA key ({config.key_format.value})")
        key = create_key_material(config.key_size, config.key_format)
        request = build_certificate_request(key.private_key, sans, config.subject)

        if preflight is not None:
            sink = SecretSink(self.cluster, preflight.secret, config.ca_file)
        else:
            sink = FilesystemSink(config.cert_dir)
        sink.stage(key, request)

        signing_request = SigningRequest(
            name=request_name,
            request=request,
            labels=dict(config.labels),
            signer_name=config.signer_name,
        )
        certificate = SigningRequestClient(self.cluster, config.wait).issue(signing_request)

        sink.deliver(key, request, certificate)

        return ProvisionResult(
            outcome=Outcome.ISSUED,
            request_name=request_name,
            common_name=sans.common_name,
            target=sink.describe(),
        )
