"""Error taxonomy shared by the QR pipeline and the HTTP layer."""


class QRForgeError(Exception):
    """Base class; ``status_code`` is what the HTTP layer answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QRForgeError):
    """Missing or malformed input, non-image logo, failed contrast check."""

    status_code = 400


class EncodingError(QRForgeError):
    """Encoder or compositor failure, e.g. corrupt logo bytes."""

    status_code = 500


class CollaboratorError(QRForgeError):
    """Blob storage or history store failure."""

    status_code = 500
