"""
Exceptions raised while preparing, decoding and verifying device-signed transactions.

Every error is terminal for the signing attempt. Nothing in this package
retries or recovers from them; errors reported by the device session itself
are not wrapped and propagate unchanged.
"""

from __future__ import annotations


class SigningError(Exception):
    """Base class for all hwsign errors"""

    pass


class UnknownNetworkError(SigningError):
    """No network parameters for the requested coin"""

    pass


class UnknownAddressTypeError(SigningError):
    """Address version matches neither the P2PKH nor the P2SH version of the network"""

    pass


class MissingDestinationError(SigningError):
    """Output has neither a derivation path nor an address"""

    pass


class InvalidOutputSpecError(SigningError):
    """Output specification is malformed (bad path, both destinations, bad value)"""

    pass


class InvalidAddressError(InvalidOutputSpecError):
    """Address string is not valid base58-check for the network"""

    pass


class DecodeError(SigningError):
    """Transaction hex or bytes could not be parsed"""

    pass


class VerificationError(SigningError):
    """Signed transaction does not match the request"""

    pass


class LengthMismatchError(VerificationError):
    pass


class ValueMismatchError(VerificationError):
    pass


class ScriptMismatchError(VerificationError):
    pass
