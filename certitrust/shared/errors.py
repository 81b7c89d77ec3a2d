class CertiTrustError(Exception):
    """Base class for certificate composition and issuance failures."""


class MissingTemplateError(CertiTrustError, LookupError):
    """Raised when a certificate references a template id absent from the store."""

    def __init__(self, template_id: str):
        super().__init__(f"Template {template_id!r} not found")
        self.template_id = template_id


class ImageDecodeError(CertiTrustError, ValueError):
    """Raised when a background image cannot be decoded."""


class CodeGenerationError(CertiTrustError, RuntimeError):
    """Raised when the verification code image could not be produced."""


class DuplicateNumberError(CertiTrustError, RuntimeError):
    """Raised when a certificate number collides with an existing one."""

    def __init__(self, number: str):
        super().__init__(f"Certificate number {number!r} already exists")
        self.number = number