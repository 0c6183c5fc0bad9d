# storefront/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import get_catalog_service
from storefront.domain.errors import NotFoundError, StorefrontError
from storefront.domain.schemas import ProductOut, ProductDetailOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[ProductOut])
def list_products(
    brand: Optional[str] = Query(None),
    from_: int = Query(0, ge=0, alias="from"),
    to: int = Query(20, ge=0),
    svc: CatalogService = Depends(get_catalog_service),
):
    return svc.list_products(brand, from_, to)


@router.get("/search", response_model=List[ProductOut])
def search_products(
    q: str = Query(""),
    from_: int = Query(0, ge=0, alias="from"),
    to: int = Query(20, ge=0),
    svc: CatalogService = Depends(get_catalog_service),
):
    return svc.search(q, from_, to)


@router.get("/{product_id}", response_model=ProductDetailOut)
def product_detail(product_id: int, svc: CatalogService = Depends(get_catalog_service)):
    try:
        return svc.detail(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StorefrontError as e:
        raise HTTPException(status_code=502, detail=e.message)
