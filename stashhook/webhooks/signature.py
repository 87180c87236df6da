"""HMAC signature verification for Bitbucket Server webhook deliveries.

Bitbucket Server signs each delivery with the webhook secret and sends the
result in ``X-Hub-Signature`` as ``<algorithm>=<hex digest>``. SHA-1 is the
historical default; SHA-256 and SHA-512 are accepted so deliveries keep
verifying when the server moves to stronger hashes.

Example:
>>> header = compute_signature(b'{"a":1}', b"topsecret", SignatureAlgorithm.SHA1)
>>> verify_signature(header, b'{"a":1}', b"topsecret")

"""

from __future__ import annotations

import binascii
import dataclasses
import enum
import hashlib
import hmac
import typing as typ

from .errors import (
    MalformedSignatureError,
    MissingSignatureError,
    SignatureMismatchError,
    UnknownAlgorithmError,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SIGNATURE_HEADER = "X-Hub-Signature"


class SignatureAlgorithm(enum.StrEnum):
    """Hash algorithms accepted in the signature header prefix."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def hash_factory(self) -> cabc.Callable[[], typ.Any]:
        """Return the ``hashlib`` constructor for this algorithm."""
        return _HASH_FACTORIES[self]

    @property
    def digest_size(self) -> int:
        """Return the digest length in bytes."""
        return self.hash_factory().digest_size


_HASH_FACTORIES: typ.Final[dict[SignatureAlgorithm, cabc.Callable[[], typ.Any]]] = {
    SignatureAlgorithm.SHA1: hashlib.sha1,
    SignatureAlgorithm.SHA256: hashlib.sha256,
    SignatureAlgorithm.SHA512: hashlib.sha512,
}


@dataclasses.dataclass(frozen=True, slots=True)
class Signature:
    """Parsed signature header: the algorithm and the expected digest."""

    algorithm: SignatureAlgorithm
    digest: bytes

    @classmethod
    def parse(cls, header: str | None) -> Signature:
        """Parse a ``<algorithm>=<hex digest>`` header value.

        Parameters
        ----------
        header : str | None
            Raw ``X-Hub-Signature`` header value.

        Returns
        -------
        Signature
            The selected algorithm and the decoded digest.

        Raises
        ------
        MissingSignatureError
            If the header is absent or empty.
        MalformedSignatureError
            If the separator is missing, the digest is not hexadecimal, or
            the digest length does not match the algorithm.
        UnknownAlgorithmError
            If the prefix is not a recognised algorithm.

        """
        if not header:
            raise MissingSignatureError

        prefix, separator, hex_digest = header.partition("=")
        if not separator:
            raise MalformedSignatureError.missing_separator()

        try:
            algorithm = SignatureAlgorithm(prefix)
        except ValueError:
            raise UnknownAlgorithmError(prefix) from None

        try:
            digest = binascii.unhexlify(hex_digest)
        except (binascii.Error, ValueError):
            raise MalformedSignatureError.invalid_hex() from None

        if len(digest) != algorithm.digest_size:
            raise MalformedSignatureError.wrong_length(
                algorithm.value, algorithm.digest_size
            )

        return cls(algorithm=algorithm, digest=digest)

    def matches(self, payload: bytes, secret: bytes) -> bool:
        """Report whether this signature is a valid HMAC of *payload*."""
        expected = _mac(payload, secret, self.algorithm)
        return hmac.compare_digest(self.digest, expected)


def _mac(payload: bytes, secret: bytes, algorithm: SignatureAlgorithm) -> bytes:
    """Return the raw HMAC of *payload* under *secret*."""
    return hmac.new(secret, payload, algorithm.hash_factory).digest()


def compute_signature(
    payload: bytes,
    secret: bytes,
    algorithm: SignatureAlgorithm = SignatureAlgorithm.SHA256,
) -> str:
    """Return the ``X-Hub-Signature`` header value for *payload*.

    Parameters
    ----------
    payload : bytes
        Payload bytes to sign.
    secret : bytes
        Shared webhook secret.
    algorithm : SignatureAlgorithm, optional
        Hash algorithm to use. Defaults to SHA-256.

    Returns
    -------
    str
        Header value in ``<algorithm>=<hex digest>`` form.

    """
    return f"{algorithm.value}={_mac(payload, secret, algorithm).hex()}"


def verify_signature(header: str | None, payload: bytes, secret: bytes) -> None:
    """Verify that *header* carries a valid HMAC of *payload* under *secret*.

    The comparison uses :func:`hmac.compare_digest` so timing does not reveal
    how many leading bytes matched.

    Parameters
    ----------
    header : str | None
        Raw ``X-Hub-Signature`` header value.
    payload : bytes
        Payload bytes the signature should cover.
    secret : bytes
        Shared webhook secret.

    Raises
    ------
    MissingSignatureError
        If the header is absent or empty.
    MalformedSignatureError
        If the header cannot be parsed.
    UnknownAlgorithmError
        If the algorithm prefix is not recognised.
    SignatureMismatchError
        If the digests differ.

    """
    signature = Signature.parse(header)
    if not signature.matches(payload, secret):
        raise SignatureMismatchError(signature.algorithm.value)


__all__ = [
    "SIGNATURE_HEADER",
    "Signature",
    "SignatureAlgorithm",
    "compute_signature",
    "verify_signature",
]
