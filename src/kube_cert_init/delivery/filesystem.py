"""Filesystem output.

Writes the private key, certificate request and certificate as PEM files
into a directory, typically an emptyDir volume shared with the workload.
"""

from pathlib import Path

from kube_cert_init import console
from kube_cert_init.exceptions import OutputError
from kube_cert_init.models import TLS_CRT, TLS_CSR, TLS_KEY, IssuedCertificate, KeyMaterial

FILE_MODE = 0o644


class FilesystemSink:
    """Delivers credentials as ``tls.key``, ``tls.csr`` and ``tls.crt``.

    Attributes:
        cert_dir: Directory receiving the files.

    """

    def __init__(self, cert_dir: Path) -> None:
        self.cert_dir = Path(cert_dir)

    def _write(self, filename: str, data: bytes) -> Path:
        """Write one file with world-readable permissions.

        Raises:
            OutputError: If the file cannot be written.

        """
        path = self.cert_dir / filename
        try:
            path.write_bytes(data)
            path.chmod(FILE_MODE)
        except OSError as err:
            raise OutputError(f"Unable to write to {path}: {err.strerror or err}") from err
        console.step(f"Wrote {console.highlight(str(path))}")
        return path

    def stage(self, key: KeyMaterial, request: bytes) -> None:
        """Write the key and request as soon as they exist."""
        self._write(TLS_KEY, key.pem)
        self._write(TLS_CSR, request)

    def deliver(self, key: KeyMaterial, request: bytes, certificate: IssuedCertificate) -> None:  # noqa: ARG002
        """Write the issued certificate next to the staged key and request."""
        self._write(TLS_CRT, certificate.certificate)

    def describe(self) -> str:
        """Human-readable target for the summary."""
        return str(self.cert_dir)
