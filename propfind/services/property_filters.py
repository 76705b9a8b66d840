"""
Tradução dos filtros de busca em predicados e ordenação SQLAlchemy
"""
from typing import List

from sqlalchemy import or_

from propfind.models.property_model import Property
from propfind.schemas.property_schema import PropertyFilters


def build_search_filter(search: str):
    """
    Busca textual (case-insensitive) em título, descrição ou localização.

    O termo é literal: % e _ digitados pelo usuário não são curingas.
    """
    return or_(
        Property.title.icontains(search, autoescape=True),
        Property.description.icontains(search, autoescape=True),
        Property.location.icontains(search, autoescape=True),
    )


def build_property_conditions(filters: PropertyFilters) -> List:
    """
    Monta a lista de predicados (combinados com AND) para a busca de imóveis.

    Filtros ausentes não restringem nada. A mesma lista deve ser usada na
    consulta da página e na contagem total.
    """
    conditions = []

    if filters.search:
        conditions.append(build_search_filter(filters.search))

    if filters.type is not None:
        conditions.append(Property.type == filters.type)

    if filters.category is not None:
        conditions.append(Property.category == filters.category)

    if filters.min_price is not None:
        conditions.append(Property.price >= filters.min_price)

    if filters.max_price is not None:
        conditions.append(Property.price <= filters.max_price)

    # quartos/banheiros: "pelo menos N"
    if filters.bedrooms is not None:
        conditions.append(Property.bedrooms >= filters.bedrooms)

    if filters.bathrooms is not None:
        conditions.append(Property.bathrooms >= filters.bathrooms)

    if filters.min_size is not None:
        conditions.append(Property.size >= filters.min_size)

    if filters.max_size is not None:
        conditions.append(Property.size <= filters.max_size)

    return conditions


def build_order_by(sort_by: str) -> List:
    """Ordenação por chave única; o id desempata para manter páginas estáveis"""
    if sort_by == "price_asc":
        primary = Property.price.asc()
    elif sort_by == "price_desc":
        primary = Property.price.desc()
    else:
        primary = Property.created_at.desc()
    return [primary, Property.id.asc()]
