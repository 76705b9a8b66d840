import math

from pydantic import Field

from propfind.core.config import settings
from propfind.schemas.base_schema import CamelModel


class PaginationParams(CamelModel):
    """Parâmetros de paginação (página começa em 1)"""
    page: int = Field(1, ge=1, description="Número da página")
    limit: int = Field(
        settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Itens por página",
    )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def calculate_total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)
