from fastapi import APIRouter, Depends, HTTPException, Response, status

from price_analyzer.api.dependencies import get_product_repo, get_search_price_use_case
from price_analyzer.api.schemas.products import (
    PriceSearchResponse,
    ProductCreateRequest,
    ProductImportItem,
    ProductImportResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from price_analyzer.application.interfaces.product_repository import ProductRepository
from price_analyzer.application.use_cases.manage_products import (
    CreateProduct,
    CreateProductInput,
    DeleteProduct,
    ImportProducts,
    ProductNotFoundError,
    UpdateProduct,
    UpdateProductInput,
)
from price_analyzer.application.use_cases.search_product_price import (
    SearchProductPrice,
    SearchProductPriceInput,
)
from price_analyzer.domain.entities.product import InvalidProductDataError
from price_analyzer.domain.enums.search_type import SearchType

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductResponse])
async def list_products(
    repo: ProductRepository = Depends(get_product_repo),
) -> list[ProductResponse]:
    return [ProductResponse.model_validate(p) for p in await repo.list_all()]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreateRequest,
    repo: ProductRepository = Depends(get_product_repo),
) -> ProductResponse:
    try:
        product = await CreateProduct(repo).execute(CreateProductInput(**body.model_dump()))
    except InvalidProductDataError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return ProductResponse.model_validate(product)


@router.get("/export", response_model=list[ProductResponse])
async def export_products(
    response: Response,
    repo: ProductRepository = Depends(get_product_repo),
) -> list[ProductResponse]:
    """Full product list as a downloadable JSON document."""
    response.headers["Content-Disposition"] = 'attachment; filename="products.json"'
    return [ProductResponse.model_validate(p) for p in await repo.list_all()]


@router.post("/import", response_model=ProductImportResponse)
async def import_products(
    items: list[ProductImportItem],
    repo: ProductRepository = Depends(get_product_repo),
) -> ProductImportResponse:
    """Upsert a product list by id. Accepts the output of /products/export."""
    try:
        result = await ImportProducts(repo).execute(
            [item.model_dump(exclude_none=True) for item in items]
        )
    except InvalidProductDataError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return ProductImportResponse(
        created=result.created,
        updated=result.updated,
        products=[ProductResponse.model_validate(p) for p in result.products],
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repo),
) -> ProductResponse:
    product = await repo.get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")
    return ProductResponse.model_validate(product)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: ProductUpdateRequest,
    repo: ProductRepository = Depends(get_product_repo),
) -> ProductResponse:
    try:
        product = await UpdateProduct(repo).execute(
            UpdateProductInput(product_id=product_id, changes=body.model_dump(exclude_unset=True))
        )
    except ProductNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")
    except InvalidProductDataError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repo),
) -> Response:
    try:
        await DeleteProduct(repo).execute(product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{product_id}/search/{search_type}", response_model=PriceSearchResponse)
async def search_product_price(
    product_id: str,
    search_type: SearchType,
    repo: ProductRepository = Depends(get_product_repo),
    use_case: SearchProductPrice = Depends(get_search_price_use_case),
) -> PriceSearchResponse:
    """Look up the competitor (new) or Avito (used) price for a stored product."""
    product = await repo.get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found.")

    result = await use_case.execute(
        SearchProductPriceInput(
            product_name=product.name,
            search_type=search_type,
            product_id=product.id,
        )
    )
    return PriceSearchResponse.model_validate(result)
