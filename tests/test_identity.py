"""Tests for identity.py module."""

import ipaddress

import pytest

from kube_cert_init.exceptions import ConfigurationError
from kube_cert_init.identity import (
    headless_domain_name,
    pod_domain_name,
    resolve_subject_alt_names,
    service_domain_name,
    signing_request_name,
)
from kube_cert_init.models import WorkloadIdentity


class TestDomainNames:
    """Tests for the individual name builders."""

    def test_pod_domain_name(self):
        """Test dots in the pod IP become dashes."""
        assert pod_domain_name("10.1.2.3", "default", "cluster.local") == "10-1-2-3.default.pod.cluster.local"

    def test_service_domain_name(self):
        """Test service name format."""
        assert service_domain_name("web", "default", "cluster.local") == "web.default.svc.cluster.local"

    def test_headless_domain_name(self):
        """Test headless name format."""
        assert headless_domain_name("h", "s", "n", "d") == "h.s.n.svc.d"

    def test_headless_domain_name_requires_both_parts(self):
        """Test headless name is empty without hostname or subdomain."""
        assert headless_domain_name("h", "", "n", "d") == ""
        assert headless_domain_name("", "s", "n", "d") == ""

    def test_signing_request_name(self):
        """Test the request name is pod name and namespace."""
        assert signing_request_name("app", "ns1") == "app-ns1"


class TestResolveSubjectAltNames:
    """Tests for full SAN resolution."""

    def test_minimal_identity(self):
        """Test a pod without hostname, subdomain or services."""
        sans = resolve_subject_alt_names(WorkloadIdentity(pod_ip="10.0.0.5", pod_name="app", namespace="ns1"))

        assert sans.dns_names == ("10-0-0-5.ns1.pod.cluster.local",)
        assert sans.ip_addresses == (ipaddress.ip_address("10.0.0.5"),)
        assert sans.common_name == "10-0-0-5.ns1.pod.cluster.local"

    def test_headless_name_as_cn(self):
        """Test the headless name takes index 0 and the pod name is kept."""
        identity = WorkloadIdentity(
            pod_ip="10.0.0.5",
            pod_name="app",
            namespace="n",
            cluster_domain="d",
            hostname="h",
            subdomain="s",
            headless_name_as_cn=True,
        )

        sans = resolve_subject_alt_names(identity)

        assert sans.dns_names == ("h.s.n.svc.d", "10-0-0-5.n.pod.d")
        assert sans.common_name == "h.s.n.svc.d"

    def test_headless_name_appended_by_default(self):
        """Test the pod name stays the CN when headless promotion is off."""
        identity = WorkloadIdentity(
            pod_ip="10.0.0.5",
            pod_name="app",
            namespace="n",
            cluster_domain="d",
            hostname="h",
            subdomain="s",
        )

        sans = resolve_subject_alt_names(identity)

        assert sans.dns_names[0] == "10-0-0-5.n.pod.d"
        assert "h.s.n.svc.d" in sans.dns_names[1:]

    def test_headless_name_as_cn_without_subdomain(self):
        """Test promotion is a no-op when no headless name can be built."""
        identity = WorkloadIdentity(pod_ip="10.0.0.5", pod_name="app", hostname="h", headless_name_as_cn=True)

        sans = resolve_subject_alt_names(identity)

        assert sans.dns_names == ("10-0-0-5.default.pod.cluster.local",)

    def test_name_order(self):
        """Test pod, headless, additional, then service names."""
        identity = WorkloadIdentity(
            pod_ip="10.0.0.5",
            pod_name="app",
            namespace="default",
            hostname="h",
            subdomain="s",
            additional_dns_names=("example.com", "", "www.example.com"),
            service_names=("web", "", "api"),
        )

        sans = resolve_subject_alt_names(identity)

        assert sans.dns_names == (
            "10-0-0-5.default.pod.cluster.local",
            "h.s.default.svc.cluster.local",
            "example.com",
            "www.example.com",
            "web.default.svc.cluster.local",
            "api.default.svc.cluster.local",
        )

    def test_service_ips(self):
        """Test service IPs follow the pod IP, IPv6 included, empties skipped."""
        identity = WorkloadIdentity(pod_ip="10.0.0.5", pod_name="app", service_ips=("10.96.0.10", "", "fd00::1"))

        sans = resolve_subject_alt_names(identity)

        assert [str(ip) for ip in sans.ip_addresses] == ["10.0.0.5", "10.96.0.10", "fd00::1"]

    def test_duplicate_ips_collapse(self):
        """Test a service IP equal to the pod IP is listed once."""
        identity = WorkloadIdentity(pod_ip="10.0.0.5", pod_name="app", service_ips=("10.0.0.5",))

        sans = resolve_subject_alt_names(identity)

        assert len(sans.ip_addresses) == 1

    def test_ipv6_pod_ip(self):
        """Test an IPv6 pod IP is accepted and used verbatim in the pod name."""
        sans = resolve_subject_alt_names(WorkloadIdentity(pod_ip="fd00::5", pod_name="app"))

        assert sans.ip_addresses == (ipaddress.ip_address("fd00::5"),)
        assert sans.dns_names == ("fd00::5.default.pod.cluster.local",)

    def test_invalid_pod_ip(self):
        """Test a malformed pod IP is a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid pod IP address"):
            resolve_subject_alt_names(WorkloadIdentity(pod_ip="10.0.0.300", pod_name="app"))

    def test_invalid_service_ip(self):
        """Test a malformed service IP is a configuration error."""
        identity = WorkloadIdentity(pod_ip="10.0.0.5", pod_name="app", service_ips=("not-an-ip",))

        with pytest.raises(ConfigurationError, match="Invalid service IP address"):
            resolve_subject_alt_names(identity)

    def test_missing_pod_ip(self):
        """Test an empty pod IP is a configuration error."""
        with pytest.raises(ConfigurationError, match="pod IP"):
            resolve_subject_alt_names(WorkloadIdentity(pod_ip="", pod_name="app"))
