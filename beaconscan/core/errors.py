"""Domain-specific errors for beaconscan."""


class BeaconscanError(Exception):
    """Base error for beaconscan."""


class DecodeError(BeaconscanError):
    """Base error for frame decoding. Never escapes the decoding facade."""


class InsufficientDataError(DecodeError):
    """Raised when a field read would run past the end of the buffer."""


class MalformedPayloadError(DecodeError):
    """Raised when a frame fails its length, version or marker checks."""


class PayloadMismatchError(BeaconscanError):
    """Raised when a record's payload does not match its beacon type."""


class ConfigLoadError(BeaconscanError):
    """Raised when reading a settings file fails."""


class ConfigValidationError(BeaconscanError):
    """Raised when a settings file does not conform to schema or semantics."""


class CaptureLoadError(BeaconscanError):
    """Raised when reading a capture file fails."""


class CaptureValidationError(BeaconscanError):
    """Raised when a capture file does not conform to schema or semantics."""


class ScanError(BeaconscanError):
    """Raised when the BLE scanning backend is unavailable or fails."""
