"""Kubernetes cluster interaction utilities.

This module provides the Cluster class, the only place that talks to the
Kubernetes API. It exposes the CertificateSigningRequest and Secret calls the
provisioning flow needs and translates API failures into package exceptions.
"""

import base64
from collections.abc import Callable
from typing import Any, TypeVar

from icecream import ic
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import MaxRetryError

from kube_cert_init import console
from kube_cert_init.exceptions import ClusterConnectionError, ClusterError
from kube_cert_init.models import SigningRequest, SigningRequestStatus

T = TypeVar("T")

_NOT_FOUND = 404


class Cluster:
    """Gateway to the Kubernetes API for certificate provisioning.

    Attributes:
        context: Description of the configuration in use ('in-cluster' or a
            kubeconfig context name).
        certificates_api: certificates.k8s.io/v1 client.
        core_api: core/v1 client.

    """

    def __init__(self) -> None:
        """Load the client configuration and construct the API clients.

        Raises:
            ClusterConnectionError: If neither in-cluster configuration nor a
                kubeconfig is available.

        """
        self.context: str = self._load_config()
        self.certificates_api = client.CertificatesV1Api()
        self.core_api = client.CoreV1Api()

    @staticmethod
    def _load_config() -> str:
        """Load in-cluster configuration, falling back to the local kubeconfig.

        Returns:
            'in-cluster' or the name of the active kubeconfig context.

        Raises:
            ClusterConnectionError: If no usable configuration is found.

        """
        try:
            config.load_incluster_config()
            return "in-cluster"
        except ConfigException as in_cluster_err:
            ic(in_cluster_err)

        try:
            _, current_context = config.list_kube_config_contexts()
            config.load_kube_config()
        except ConfigException as e:
            raise ClusterConnectionError(f"Not running in a cluster and no usable kubeconfig: {e}") from e
        return str(current_context["name"])

    @staticmethod
    def _call(description: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Invoke an API method, translating transport and API errors.

        Args:
            description: What is being done, used in the error message.
            func: Bound Kubernetes client method.

        Returns:
            Whatever the client method returns.

        Raises:
            ClusterError: With the HTTP status attached when the API answered.

        """
        try:
            return func(*args, **kwargs)
        except ApiException as e:
            raise ClusterError(f"Failed to {description}: {e.status} {e.reason}", status=e.status) from e
        except MaxRetryError as e:
            raise ClusterError(f"Failed to {description}: {e.reason}") from e

    def create_signing_request(self, signing_request: SigningRequest) -> None:
        """Submit a CertificateSigningRequest.

        Raises:
            ClusterError: If the API rejects the request or is unreachable.

        """
        body = client.V1CertificateSigningRequest(
            api_version="certificates.k8s.io/v1",
            kind="CertificateSigningRequest",
            metadata=client.V1ObjectMeta(name=signing_request.name, labels=dict(signing_request.labels) or None),
            spec=client.V1CertificateSigningRequestSpec(
                request=base64.b64encode(signing_request.request).decode("ascii"),
                signer_name=signing_request.signer_name,
                groups=list(signing_request.groups),
                usages=list(signing_request.usages),
            ),
        )
        ic(body.metadata)
        self._call(
            f"create certificate signing request {signing_request.name}",
            self.certificates_api.create_certificate_signing_request,
            body,
        )

    def get_signing_request(self, name: str) -> SigningRequestStatus | None:
        """Read a CertificateSigningRequest.

        Returns:
            The observed status, or None if the request does not exist.

        Raises:
            ClusterError: For any failure other than not found.

        """
        try:
            csr = self._call(
                f"read certificate signing request {name}",
                self.certificates_api.read_certificate_signing_request,
                name,
            )
        except ClusterError as e:
            if e.status == _NOT_FOUND:
                return None
            raise

        status = csr.status
        conditions = (status.conditions or []) if status is not None else []
        certificate = (status.certificate or "") if status is not None else ""
        return SigningRequestStatus(
            name=name,
            condition_types=tuple(str(condition.type) for condition in conditions),
            certificate=_decode_certificate(certificate),
        )

    def delete_signing_request(self, name: str) -> bool:
        """Delete a CertificateSigningRequest.

        Returns:
            True if a request was deleted, False if none existed.

        Raises:
            ClusterError: For any failure other than not found.

        """
        try:
            self._call(
                f"delete certificate signing request {name}",
                self.certificates_api.delete_certificate_signing_request,
                name,
            )
        except ClusterError as e:
            if e.status == _NOT_FOUND:
                return False
            raise
        return True

    def get_secret(self, name: str, namespace: str) -> client.V1Secret | None:
        """Read a Secret.

        Returns:
            The secret, or None if it does not exist.

        Raises:
            ClusterError: For any failure other than not found.

        """
        try:
            return self._call(
                f"read secret {namespace}/{name}",
                self.core_api.read_namespaced_secret,
                name,
                namespace,
            )
        except ClusterError as e:
            if e.status == _NOT_FOUND:
                return None
            raise

    def update_secret(self, secret: client.V1Secret) -> None:
        """Persist a modified Secret.

        Raises:
            ClusterError: If the update is rejected or the API is unreachable.

        """
        name = secret.metadata.name
        namespace = secret.metadata.namespace
        self._call(
            f"update secret {namespace}/{name}",
            self.core_api.replace_namespaced_secret,
            name,
            namespace,
            secret,
        )
        console.step(f"Updated secret {console.highlight(f'{namespace}/{name}')}")

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Cluster(context={self.context!r})"


def _decode_certificate(value: str | bytes) -> bytes:
    """Decode status.certificate, which the API serialises as base64."""
    if not value:
        return b""
    if isinstance(value, bytes):
        value = value.decode("ascii")
    try:
        return base64.b64decode(value, validate=True)
    except ValueError:
        # Already PEM text rather than base64
        return value.encode()
