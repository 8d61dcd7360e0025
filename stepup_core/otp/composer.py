"""
Message Composer
================
Renders the OTP delivery text for an operation.
"""

from typing import List, Optional

from stepup_core.operation import OperationContext, OperationValueExtractor

from .catalog import MessageCatalog
from .models import AuthorizationCode


class MessageComposer:
    """Selects the template by operation kind and fills in fields and code."""

    def __init__(
        self,
        catalog: Optional[MessageCatalog] = None,
        extractor: Optional[OperationValueExtractor] = None,
    ):
        self.catalog = catalog or MessageCatalog()
        self.extractor = extractor or OperationValueExtractor()

    def message_args(self, context: OperationContext, code: str) -> List[str]:
        """Operation items followed by the code."""
        return self.extractor.items(context) + [code]

    def compose(
        self,
        context: OperationContext,
        authorization_code: AuthorizationCode,
        lang: Optional[str] = None,
    ) -> str:
        """
        Render the OTP message text.

        Args:
            context: Operation the code is bound to
            authorization_code: Generated code
            lang: Language of the message

        Returns:
            Message text

        Raises:
            InvalidOperationContextError: For unsupported operations
        """
        kind = self.extractor.registry.get(context.name)
        template = self.catalog.get(kind.template_key, lang)
        return template.format(*self.message_args(context, authorization_code.code))
