"""Document number generation from the document type prefix."""
from __future__ import annotations

import secrets
from typing import Optional

from ..schemas import DocumentType

FALLBACK_PREFIX = "INV"


def generate_document_number(document_type: Optional[DocumentType]) -> str:
    prefix = document_type.prefix if document_type is not None else FALLBACK_PREFIX
    return f"{prefix}-{secrets.token_hex(3).upper()}"
