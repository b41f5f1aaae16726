"""Run configuration.

This module turns raw option values into the immutable ProvisionConfig that
every component receives. All configuration errors are raised here, before
any network or cryptographic work starts.
"""

from pathlib import Path

from kube_cert_init.exceptions import ConfigurationError
from kube_cert_init.keys import check_key_size
from kube_cert_init.models import (
    DEFAULT_CA_FILE,
    DEFAULT_CERT_DIR,
    DEFAULT_SIGNER_NAME,
    KeyFormat,
    ProvisionConfig,
    SubjectFields,
    WorkloadIdentity,
)
from kube_cert_init.retry import DEFAULT_INTERVAL, WaitPolicy


def split_csv(value: str | None) -> tuple[str, ...]:
    """Split a comma separated option value, dropping empty entries.

    Args:
        value: The raw option value (e.g., 'web,,api').

    Returns:
        The non-empty entries in order (e.g., ('web', 'api')).

    """
    if not value:
        return ()
    return tuple(entry.strip() for entry in value.split(",") if entry.strip())


def parse_labels(value: str | None) -> dict[str, str]:
    """Parse a comma separated list of key=value labels.

    Empty entries and entries with an empty key are skipped.

    Raises:
        ConfigurationError: If an entry has no '=' separator.

    """
    labels: dict[str, str] = {}
    for entry in split_csv(value):
        if "=" not in entry:
            raise ConfigurationError(f"Invalid label '{entry}': must be in key=value format")
        key, _, label_value = entry.partition("=")
        if not key:
            continue
        labels[key] = label_value
    return labels


def build_config(
    *,
    pod_ip: str,
    pod_name: str,
    namespace: str = "default",
    cluster_domain: str = "cluster.local",
    hostname: str = "",
    subdomain: str = "",
    service_names: str = "",
    service_ips: str = "",
    additional_dns_names: str = "",
    headless_name_as_cn: bool = False,
    cert_dir: str | None = None,
    secret_name: str | None = None,
    key_size: int = 2048,
    pkcs8: bool = False,
    countries: str = "",
    organizations: str = "",
    organizational_units: str = "",
    labels: str = "",
    signer_name: str = DEFAULT_SIGNER_NAME,
    ca_file: str | Path = DEFAULT_CA_FILE,
    poll_interval: float = DEFAULT_INTERVAL,
    max_wait: float | None = None,
) -> ProvisionConfig:
    """Validate option values and build the run configuration.

    Raises:
        ConfigurationError: If the options are inconsistent or incomplete.

    """
    if cert_dir and secret_name:
        raise ConfigurationError("--cert-dir and --secret-name cannot be used together")
    if not pod_name:
        raise ConfigurationError("A pod name is required")
    if not pod_ip:
        raise ConfigurationError("A pod IP address is required")
    if not namespace:
        raise ConfigurationError("A namespace is required")
    if poll_interval <= 0:
        raise ConfigurationError(f"Poll interval must be positive, got {poll_interval}")
    check_key_size(key_size)

    identity = WorkloadIdentity(
        pod_ip=pod_ip,
        pod_name=pod_name,
        namespace=namespace,
        cluster_domain=cluster_domain,
        hostname=hostname,
        subdomain=subdomain,
        service_names=split_csv(service_names),
        service_ips=split_csv(service_ips),
        additional_dns_names=split_csv(additional_dns_names),
        headless_name_as_cn=headless_name_as_cn,
    )

    return ProvisionConfig(
        identity=identity,
        key_size=key_size,
        key_format=KeyFormat.PKCS8 if pkcs8 else KeyFormat.PKCS1,
        subject=SubjectFields(
            countries=split_csv(countries),
            organizations=split_csv(organizations),
            organizational_units=split_csv(organizational_units),
        ),
        labels=parse_labels(labels),
        signer_name=signer_name,
        cert_dir=None if secret_name else Path(cert_dir or DEFAULT_CERT_DIR),
        secret_name=secret_name or None,
        ca_file=Path(ca_file),
        wait=WaitPolicy(interval=poll_interval, max_wait=max_wait),
    )
