#!/usr/bin/env python
"""Command-line interface for kube-cert-init.

This module provides the main CLI entry point, turning command-line options
into a ProvisionConfig, running the Provisioner, and mapping failures to a
non-zero exit code.
"""

import sys

import click
from icecream import ic
from rich.markup import escape

from kube_cert_init import __version__, console
from kube_cert_init.config import build_config
from kube_cert_init.core.provisioner import Outcome, ProvisionResult, Provisioner
from kube_cert_init.exceptions import CertInitError
from kube_cert_init.models import DEFAULT_CA_FILE, DEFAULT_SIGNER_NAME
from kube_cert_init.retry import DEFAULT_INTERVAL


def print_summary(result: ProvisionResult) -> None:
    """Print the final summary panel for a run.

    Args:
        result: The outcome of the run.

    """
    if result.outcome is Outcome.ALREADY_PROVISIONED:
        console.summary_panel(
            "Credentials Already Present",
            {"Secret": result.target},
        )
        return

    console.summary_panel(
        "Certificate Issued",
        {
            "Request": result.request_name,
            "Common Name": result.common_name,
            "Output": result.target,
        },
    )


@click.command(help="Request a Kubernetes-signed TLS certificate for this pod")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--additional-dnsnames", default="", help="additional dns names; comma separated")
@click.option("--cert-dir", default=None, help="directory the TLS files are written to [default: /etc/tls]")
@click.option("--cluster-domain", default="cluster.local", show_default=True, help="Kubernetes cluster domain")
@click.option("--headless-name-as-cn", is_flag=True, help="use the headless domain name as CN when available")
@click.option("--hostname", default="", help="hostname as defined by pod.spec.hostname")
@click.option("--namespace", default="default", show_default=True, help="pod.metadata.namespace")
@click.option("--pkcs8", is_flag=True, help="write the private key as unencrypted PKCS#8 instead of PKCS#1")
@click.option("--pod-name", default="", help="name as defined by pod.metadata.name")
@click.option("--pod-ip", default="", help="IP address as defined by pod.status.podIP")
@click.option("--service-names", default="", help="service names that resolve to this Pod; comma separated")
@click.option("--service-ips", default="", help="service IP addresses that resolve to this Pod; comma separated")
@click.option("--subdomain", default="", help="subdomain as defined by pod.spec.subdomain")
@click.option("--labels", default="", help="labels for the CertificateSigningRequest; comma separated key=value")
@click.option("--secret-name", default=None, help="secret to store generated files in; nothing is written to disk")
@click.option("--keysize", default=2048, show_default=True, type=int, help="bit size of private key")
@click.option("--countries", default="", help="country codes for the certificate request; comma separated")
@click.option("--organizations", default="", help="organizations for the certificate request; comma separated")
@click.option("--organizational-units", default="", help="organizational units for the request; comma separated")
@click.option("--signer-name", default=DEFAULT_SIGNER_NAME, show_default=True, help="signerName of the request")
@click.option("--ca-file", default=str(DEFAULT_CA_FILE), show_default=True, help="CA bundle stored as ca.crt")
@click.option("--poll-interval", default=DEFAULT_INTERVAL, show_default=True, type=float, help="retry interval")
@click.option("--max-wait", default=None, type=float, help="give up waiting after this many seconds")
def cli(
    version: bool,
    debug: bool,
    additional_dnsnames: str,
    cert_dir: str | None,
    cluster_domain: str,
    headless_name_as_cn: bool,
    hostname: str,
    namespace: str,
    pkcs8: bool,
    pod_name: str,
    pod_ip: str,
    service_names: str,
    service_ips: str,
    subdomain: str,
    labels: str,
    secret_name: str | None,
    keysize: int,
    countries: str,
    organizations: str,
    organizational_units: str,
    signer_name: str,
    ca_file: str,
    poll_interval: float,
    max_wait: float | None,
) -> None:
    """Process CLI arguments and provision the certificate.

    Exits with status 0 when the certificate was delivered or the target
    secret already holds credentials, and 1 on any unrecoverable error.
    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    try:
        config = build_config(
            pod_ip=pod_ip,
            pod_name=pod_name,
            namespace=namespace,
            cluster_domain=cluster_domain,
            hostname=hostname,
            subdomain=subdomain,
            service_names=service_names,
            service_ips=service_ips,
            additional_dns_names=additional_dnsnames,
            headless_name_as_cn=headless_name_as_cn,
            cert_dir=cert_dir,
            secret_name=secret_name,
            key_size=keysize,
            pkcs8=pkcs8,
            countries=countries,
            organizations=organizations,
            organizational_units=organizational_units,
            labels=labels,
            signer_name=signer_name,
            ca_file=ca_file,
            poll_interval=poll_interval,
            max_wait=max_wait,
        )
        result = Provisioner(config).run()
    except CertInitError as e:
        console.error(escape(str(e)))
        sys.exit(1)

    print_summary(result)


if __name__ == "__main__":
    cli()
