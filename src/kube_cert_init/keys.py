"""Private key and certificate request generation.

This module builds the key material and the PKCS#10 certificate request
submitted to the cluster CA. The cryptographic primitives come from the
cryptography library.
"""

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.x509.oid import NameOID

from kube_cert_init.exceptions import ConfigurationError, KeyMaterialError
from kube_cert_init.models import KeyFormat, KeyMaterial, SubjectAltNames, SubjectFields

MIN_KEY_SIZE = 1024
PUBLIC_EXPONENT = 65537

_PRIVATE_FORMATS = {
    KeyFormat.PKCS1: serialization.PrivateFormat.TraditionalOpenSSL,
    KeyFormat.PKCS8: serialization.PrivateFormat.PKCS8,
}


def check_key_size(key_size: int) -> None:
    """Reject modulus sizes below the supported minimum.

    Raises:
        ConfigurationError: If the key size is below MIN_KEY_SIZE.

    """
    if key_size < MIN_KEY_SIZE:
        raise ConfigurationError(f"Key size must be at least {MIN_KEY_SIZE} bits, got {key_size}")


def generate_private_key(key_size: int = 2048) -> RSAPrivateKey:
    """Generate an RSA private key with the specified modulus size.

    Raises:
        ConfigurationError: If the key size is below the supported minimum.
        KeyMaterialError: If key generation fails.

    """
    check_key_size(key_size)
    try:
        return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)
    except (ValueError, UnsupportedAlgorithm) as err:
        raise KeyMaterialError(f"Unable to generate the private key: {err}") from err


def serialize_private_key(key: RSAPrivateKey, key_format: KeyFormat = KeyFormat.PKCS1) -> bytes:
    """Serialize a private key to unencrypted PEM.

    PKCS#1 produces an ``RSA PRIVATE KEY`` block, PKCS#8 a ``PRIVATE KEY`` block.
    """
    try:
        return key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=_PRIVATE_FORMATS[key_format],
            encryption_algorithm=serialization.NoEncryption(),
        )
    except (ValueError, TypeError) as err:
        raise KeyMaterialError(f"Unable to encode the private key as {key_format.value}: {err}") from err


def create_key_material(key_size: int = 2048, key_format: KeyFormat = KeyFormat.PKCS1) -> KeyMaterial:
    """Generate a private key and its PEM encoding.

    Args:
        key_size: RSA modulus length in bits.
        key_format: Encoding for the PEM form.

    Returns:
        KeyMaterial holding the key object and its PEM bytes.

    """
    private_key = generate_private_key(key_size)
    return KeyMaterial(
        private_key=private_key,
        key_format=key_format,
        pem=serialize_private_key(private_key, key_format),
    )


def build_subject_name(common_name: str, subject: SubjectFields) -> x509.Name:
    """Build the request Subject.

    Country, Organization and OrganizationalUnit attributes are emitted once
    per non-empty configured value and left out entirely otherwise.
    """
    attributes = [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    for oid, values in (
        (NameOID.COUNTRY_NAME, subject.countries),
        (NameOID.ORGANIZATION_NAME, subject.organizations),
        (NameOID.ORGANIZATIONAL_UNIT_NAME, subject.organizational_units),
    ):
        attributes.extend(x509.NameAttribute(oid, value) for value in values if value)
    return x509.Name(attributes)


def build_certificate_request(
    key: RSAPrivateKey,
    sans: SubjectAltNames,
    subject: SubjectFields | None = None,
) -> bytes:
    """Build and sign a certificate request over the resolved names.

    Args:
        key: Private key that signs the request.
        sans: DNS names and IP addresses; the first DNS name is the Common Name.
        subject: Optional Subject attributes.

    Returns:
        The PEM-encoded ``CERTIFICATE REQUEST``.

    Raises:
        KeyMaterialError: If the request cannot be built or signed.

    """
    subject = subject or SubjectFields()
    general_names: list[x509.GeneralName] = [x509.DNSName(name) for name in sans.dns_names]
    general_names.extend(x509.IPAddress(address) for address in sans.ip_addresses)

    # NameAttribute validates values itself (e.g., two-letter country codes)
    try:
        csr = (
            x509.CertificateSigningRequestBuilder()
            .subject_name(build_subject_name(sans.common_name, subject))
            .add_extension(x509.SubjectAlternativeName(general_names), critical=False)
            .sign(key, hashes.SHA256())
        )
    except (ValueError, TypeError) as err:
        raise KeyMaterialError(f"Unable to generate the certificate request: {err}") from err

    return csr.public_bytes(serialization.Encoding.PEM)
