"""
Code Generator
==============
Authorization codes bound to operation content.
"""

from typing import List, Optional, Sequence

from stepup_core.errors import InvalidOperationContextError
from stepup_core.operation import OperationContext, OperationValueExtractor

from .digest import CODE_LENGTH, compute_digest, generate_salt
from .models import AuthorizationCode


class CodeGenerator:
    """
    Generates salted authorization codes.

    A fresh salt per issuance makes codes for identical operation content
    unpredictable, while the same items and salt always give the same code.
    """

    def __init__(
        self,
        extractor: Optional[OperationValueExtractor] = None,
        code_length: int = CODE_LENGTH,
    ):
        self.extractor = extractor or OperationValueExtractor()
        self.code_length = code_length

    def digest_items(self, context: OperationContext) -> List[str]:
        """
        Items the code for an operation is derived from.

        Operations without bound fields (``login``) use the operation name.
        """
        items = self.extractor.items(context)
        return items or [context.name]

    def generate(self, items: Sequence[str]) -> AuthorizationCode:
        """Generate a code over items with a fresh salt."""
        if not items:
            raise InvalidOperationContextError("No operation data to generate code from")
        salt = generate_salt()
        return AuthorizationCode(code=self.digest(items, salt), salt=salt)

    def digest(self, items: Sequence[str], salt: bytes) -> str:
        return compute_digest(items, salt, self.code_length)

    def generate_for(self, context: OperationContext) -> AuthorizationCode:
        """Generate a code bound to an operation's content."""
        return self.generate(self.digest_items(context))
