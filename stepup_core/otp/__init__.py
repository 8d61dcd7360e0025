"""
OTP Generation and Verification
===============================
Operation-bound authorization codes, message composition and records.

The lifecycle service lives in ``stepup_core.otp.service``.
"""

from .models import AuthorizationCode, OTPRecord, VerificationFailureReason, VerificationResult
from .digest import compute_digest, generate_salt, codes_match, CODE_LENGTH, SALT_LENGTH
from .generator import CodeGenerator
from .catalog import MessageCatalog, DEFAULT_TEMPLATES
from .composer import MessageComposer

__all__ = [
    # Models
    "AuthorizationCode",
    "OTPRecord",
    "VerificationFailureReason",
    "VerificationResult",
    # Digest
    "compute_digest",
    "generate_salt",
    "codes_match",
    "CODE_LENGTH",
    "SALT_LENGTH",
    # Generator
    "CodeGenerator",
    # Composer
    "MessageCatalog",
    "DEFAULT_TEMPLATES",
    "MessageComposer",
]
