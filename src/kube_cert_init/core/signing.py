"""CertificateSigningRequest lifecycle.

This module provides the SigningRequestClient, which turns a signing request
into an issued certificate. The protocol is safe to re-run after the process
is killed at any point:

1. Delete any request left behind under the same name.
2. If a request of that name is still visible, poll it instead of
   submitting a duplicate; otherwise create it.
3. Poll until the first condition is Approved and a certificate is present,
   retrying every fetch failure.
4. Delete the request again so no residue is left in the cluster.

Two processes racing on the same name are not coordinated; both may see the
request missing and both try to create it, and the loser fails on create.
"""

from icecream import ic
from rich.markup import escape

from kube_cert_init import console
from kube_cert_init.core.cluster import Cluster
from kube_cert_init.exceptions import ClusterError, SigningRequestError
from kube_cert_init.models import IssuedCertificate, SigningRequest, SigningRequestStatus
from kube_cert_init.retry import WaitPolicy

# Shorter payloads are treated as "not populated yet"
_MIN_CERTIFICATE_LENGTH = 2


class SigningRequestClient:
    """Submits a signing request and blocks until the certificate is issued.

    Attributes:
        cluster: Gateway to the Kubernetes API.
        wait_policy: Policy for the pause between polls.

    """

    def __init__(self, cluster: Cluster, wait_policy: WaitPolicy | None = None) -> None:
        self.cluster = cluster
        self.wait_policy = wait_policy or WaitPolicy()

    def issue(self, signing_request: SigningRequest) -> IssuedCertificate:
        """Obtain a certificate for the signing request.

        Args:
            signing_request: The request to submit.

        Returns:
            The issued certificate.

        Raises:
            SigningRequestError: If the request has to be created and the API rejects it.
            WaitCancelledError: If the wait policy gives up before approval.

        """
        name = signing_request.name

        self._cleanup(name)

        if self._exists(name):
            console.info(f"Signing request {console.highlight(name)} already exists")
        else:
            self._create(signing_request)
            console.action("Waiting for certificate...")

        certificate = self._poll(name)

        self._cleanup(name)
        return certificate

    def _cleanup(self, name: str) -> None:
        """Delete the request, logging failures instead of raising them."""
        console.step(f"Deleting certificate signing request {console.highlight(name)}")
        try:
            deleted = self.cluster.delete_signing_request(name)
        except ClusterError as e:
            console.warning(f"Unable to delete certificate signing request {escape(name)}: {escape(str(e))}")
            return
        if deleted:
            console.step(f"Removed certificate signing request {console.highlight(name)}")

    def _exists(self, name: str) -> bool:
        """Check whether a request of this name is visible.

        A failed read is treated as absence so the run proceeds to create.
        """
        try:
            return self.cluster.get_signing_request(name) is not None
        except ClusterError as e:
            console.warning(f"Unable to check for an existing signing request: {escape(str(e))}")
            return False

    def _create(self, signing_request: SigningRequest) -> None:
        try:
            self.cluster.create_signing_request(signing_request)
        except ClusterError as e:
            raise SigningRequestError(f"Unable to create the certificate signing request: {e}") from e
        console.success(f"Submitted certificate signing request {console.highlight(signing_request.name)}")

    def _poll(self, name: str) -> IssuedCertificate:
        """Fetch the request until it carries an approved certificate."""
        tracker = self.wait_policy.start()
        label = escape(name)
        retry_note = f"trying again in {self.wait_policy.interval:g} seconds"
        while True:
            try:
                status = self.cluster.get_signing_request(name)
            except ClusterError as e:
                console.warning(f"Unable to retrieve certificate signing request ({label}): {escape(str(e))}")
                tracker.wait(f"certificate signing request {name}")
                continue

            ic(status)
            certificate = self._issued_certificate(status)
            if certificate is not None:
                console.success(f"Certificate signing request {console.highlight(name)} approved")
                return certificate

            if status is None:
                console.warning(f"Certificate signing request ({label}) not found; {retry_note}")
            elif not status.condition_types:
                console.info(f"Certificate signing request ({label}) not approved; {retry_note}")
            elif not status.approved:
                console.info(
                    f"Certificate signing request ({label}) is {escape(status.condition_types[0])}; {retry_note}"
                )
            else:
                console.info(f"Certificate for ({label}) not populated yet; {retry_note}")
            tracker.wait(f"approval of certificate signing request {name}")

    @staticmethod
    def _issued_certificate(status: SigningRequestStatus | None) -> IssuedCertificate | None:
        """Return the certificate if the request is approved and populated."""
        if status is None or not status.approved:
            return None
        if len(status.certificate) < _MIN_CERTIFICATE_LENGTH:
            return None
        return IssuedCertificate(certificate=status.certificate, condition=status.condition_types[0])
