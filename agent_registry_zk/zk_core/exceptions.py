"""
⚠️ DRAFT — requires crypto review before production use

Custom exceptions for the agent registry verifier.

A false proof is never an exception; it is VerifyResult.INVALID. These
exceptions cover structurally malformed input and registry state errors.
"""


class RegistryProtocolError(Exception):
    """Base exception for agent registry errors."""

    pass


class MalformedInputError(RegistryProtocolError):
    """Input has the wrong shape, arity or encoding."""

    pass


class InvalidEncodingError(MalformedInputError):
    """Bytes are not a canonical field element or have the wrong length."""

    pass


class InvalidPointError(MalformedInputError):
    """Coordinates do not describe a point of the expected group."""

    pass


class AccumulatorError(RegistryProtocolError):
    """Merkle accumulator state error."""

    pass


class AccumulatorFullError(AccumulatorError):
    """Every leaf slot of the fixed-depth tree is occupied."""

    pass


class AlreadyRegisteredError(AccumulatorError):
    """A non-membership witness was requested for a registered hash."""

    pass


class NotRegisteredError(AccumulatorError):
    """A membership witness was requested for an unknown hash."""

    pass


class StorageUnavailableError(RegistryProtocolError):
    """The host key-value store could not serve a request."""

    pass


class ConfigurationError(RegistryProtocolError):
    """Configuration error."""

    pass
