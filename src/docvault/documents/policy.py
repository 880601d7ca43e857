from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from docvault.exceptions import NotFoundError, UnauthorizedError

from .models import Document

if TYPE_CHECKING:
    from docvault.auth.session import Principal

logger = logging.getLogger(__name__)


def is_owner(doc: Document, principal: "Principal") -> bool:
    return doc.created_by == principal.id


def ensure_owner(doc: Optional[Document], principal: "Principal") -> Document:
    """Return ``doc`` if the caller owns it; every read and delete goes through here."""
    if doc is None:
        raise NotFoundError("Document not found")
    if not is_owner(doc, principal):
        logger.warning(
            "Ownership check failed",
            extra={"document_id": str(doc.id), "owner_id": principal.id},
        )
        raise UnauthorizedError("You do not have permission to access this document")
    return doc


def owned_only(docs: Iterable[Document], principal: "Principal") -> list[Document]:
    return [d for d in docs if is_owner(d, principal)]
