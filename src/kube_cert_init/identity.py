"""Workload identity to Subject Alternative Name resolution.

This module maps the facts Kubernetes exposes about a pod to the DNS names
and IP addresses its serving certificate must cover. Everything here is pure:
no I/O, and the only failure is a malformed IP literal.
"""

import ipaddress

from icecream import ic

from kube_cert_init.exceptions import ConfigurationError
from kube_cert_init.models import IPAddress, SubjectAltNames, WorkloadIdentity


def pod_domain_name(ip: str, namespace: str, domain: str) -> str:
    """Return the A record name Kubernetes DNS serves for a pod IP.

    Args:
        ip: The pod IP address (e.g., '10.1.2.3').
        namespace: The pod namespace.
        domain: The cluster domain.

    Returns:
        The name in the form ``10-1-2-3.<namespace>.pod.<domain>``.

    """
    return f"{ip.replace('.', '-')}.{namespace}.pod.{domain}"


def service_domain_name(name: str, namespace: str, domain: str) -> str:
    """Return the DNS name of a service."""
    return f"{name}.{namespace}.svc.{domain}"


def headless_domain_name(hostname: str, subdomain: str, namespace: str, domain: str) -> str:
    """Return the headless service name of a pod, or '' without hostname and subdomain.

    Args:
        hostname: The pod.spec.hostname value.
        subdomain: The pod.spec.subdomain value.
        namespace: The pod namespace.
        domain: The cluster domain.

    Returns:
        ``<hostname>.<subdomain>.<namespace>.svc.<domain>``, or an empty
        string when either hostname or subdomain is empty.

    """
    if not hostname or not subdomain:
        return ""
    return f"{hostname}.{subdomain}.{namespace}.svc.{domain}"


def signing_request_name(pod_name: str, namespace: str) -> str:
    """Return the deterministic CertificateSigningRequest name for a pod."""
    return f"{pod_name}-{namespace}"


def parse_ip(value: str, *, kind: str) -> IPAddress:
    """Parse an IPv4 or IPv6 literal.

    Args:
        value: The literal to parse.
        kind: What the address is, used in the error message (e.g., 'pod').

    Returns:
        The parsed address.

    Raises:
        ConfigurationError: If the literal is not a valid IP address.

    """
    try:
        return ipaddress.ip_address(value.strip())
    except ValueError as err:
        raise ConfigurationError(f"Invalid {kind} IP address: '{value}'") from err


def resolve_ip_addresses(identity: WorkloadIdentity) -> tuple[IPAddress, ...]:
    """Collect the IP SANs: the pod IP followed by every service IP.

    Raises:
        ConfigurationError: If the pod IP is missing or any address is malformed.

    """
    if not identity.pod_ip:
        raise ConfigurationError("A pod IP address is required")

    addresses: list[IPAddress] = [parse_ip(identity.pod_ip, kind="pod")]
    for value in identity.service_ips:
        if not value:
            continue
        address = parse_ip(value, kind="service")
        if address not in addresses:
            addresses.append(address)
    return tuple(addresses)


def resolve_dns_names(identity: WorkloadIdentity) -> tuple[str, ...]:
    """Collect the DNS SANs in certificate order.

    The pod domain name always comes first unless a headless name is
    derivable and ``headless_name_as_cn`` is set, in which case the headless
    name takes index 0 and the pod domain name follows it. Additional names
    come next, then one name per service.
    """
    domain = identity.cluster_domain
    namespace = identity.namespace

    names = [pod_domain_name(identity.pod_ip, namespace, domain)]
    headless = headless_domain_name(identity.hostname, identity.subdomain, namespace, domain)
    if headless:
        if identity.headless_name_as_cn:
            names.insert(0, headless)
        else:
            names.append(headless)

    names.extend(name for name in identity.additional_dns_names if name)
    names.extend(service_domain_name(name, namespace, domain) for name in identity.service_names if name)
    return tuple(names)


def resolve_subject_alt_names(identity: WorkloadIdentity) -> SubjectAltNames:
    """Derive the Subject Alternative Names for a workload.

    IP addresses are validated before any name is built, so a malformed
    literal aborts the run before key generation or any API call.

    Args:
        identity: The workload identity facts.

    Returns:
        The DNS names (index 0 is the Common Name) and IP addresses.

    Raises:
        ConfigurationError: If the pod IP is missing or an IP literal is malformed.

    """
    ip_addresses = resolve_ip_addresses(identity)
    dns_names = resolve_dns_names(identity)
    ic(dns_names, ip_addresses)
    return SubjectAltNames(dns_names=dns_names, ip_addresses=ip_addresses)
