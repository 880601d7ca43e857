from .base import Page, Repository, paginate
from .mixins import CRUDMixin, apply_filters

__all__ = ["Page", "Repository", "paginate", "CRUDMixin", "apply_filters"]
