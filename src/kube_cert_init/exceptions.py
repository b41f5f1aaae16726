"""Custom exceptions for kube-cert-init.

This module defines the exception hierarchy used throughout the application.
Every unrecoverable failure is raised as a subclass of CertInitError so the
CLI has a single place to turn errors into a diagnostic and an exit code.
"""


class CertInitError(Exception):
    """Base exception for all kube-cert-init errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all kube-cert-init errors with a single
    except clause if desired.
    """

    pass


class ConfigurationError(CertInitError):
    """Raised when the supplied configuration cannot be used.

    This can occur when:
    - Both a certificate directory and a secret name are given
    - The pod IP or a service IP is not a valid IPv4/IPv6 literal
    - The pod name or pod IP is missing
    - A label is not in key=value form
    """

    pass


class KeyMaterialError(CertInitError):
    """Raised when the private key or the certificate request cannot be built.

    Failures here are permanent and never retried.
    """

    pass


class ClusterConnectionError(CertInitError):
    """Raised when a Kubernetes API client cannot be constructed.

    This can occur when:
    - The process is not running inside a cluster and no kubeconfig exists
    - The kubeconfig is invalid
    """

    pass


class ClusterError(CertInitError):
    """Raised when a call to the Kubernetes API fails.

    Attributes:
        status: HTTP status returned by the API server, if any.

    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SigningRequestError(CertInitError):
    """Raised when the CertificateSigningRequest cannot be created.

    A rejected create reflects a malformed request rather than a transient
    condition, so it is not retried.
    """

    pass


class OutputError(CertInitError):
    """Raised when the issued credentials cannot be delivered.

    This can occur when:
    - A file in the certificate directory cannot be written
    - The local CA bundle cannot be read
    - The target secret cannot be updated
    """

    pass


class WaitCancelledError(CertInitError):
    """Raised when a wait loop gives up because its deadline passed or it was cancelled."""

    pass
