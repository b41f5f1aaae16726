"""Credential delivery subpackage.

This package contains the secret preflight check and the two mutually
exclusive output sinks: a directory of PEM files or an existing Secret.
"""

from kube_cert_init.delivery.filesystem import FilesystemSink
from kube_cert_init.delivery.preflight import REQUIRED_SECRET_KEYS, PreflightResult, check_secret
from kube_cert_init.delivery.secret import SecretSink

__all__ = [
    # preflight
    "check_secret",
    "PreflightResult",
    "REQUIRED_SECRET_KEYS",
    # sinks
    "FilesystemSink",
    "SecretSink",
]
