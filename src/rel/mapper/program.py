"""Demo program for the struct-mapping layer.

Truncates the catalogue, creates products, renames one inside a transaction,
adds specs and images, and reads everything back including two joins.
"""

from collections.abc import Sequence
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.rel.core.projection import FieldRegistry
from src.rel.core.report import log_summary
from src.rel.core.services.database.db_session import DbSessionService
from src.rel.entities import (
    Image,
    ImageTable,
    Product,
    ProductImage,
    ProductSpec,
    ProductTable,
    Spec,
    SpecTable,
)
from src.rel.entities._base import utcnow
from src.rel.errors import InsertError, SelectError, TransactionError
from src.rel.mapper.data_mapper import DataMapper, SqlExecutor, rows_to_records

PRODUCT_SPEC_ALIASES = {"p": Product, "s": Spec}
PRODUCT_IMAGE_ALIASES = {"p": Product, "i": Image}


def create_product(id: str, name: str, executor: SqlExecutor, now: datetime | None = None) -> None:
    now = now or utcnow()
    try:
        executor.insert(ProductTable(id=id, name=name, created_at=now, updated_at=now))
    except SQLAlchemyError as e:
        raise InsertError(f"Insert: {e}") from e


def find_products(executor: SqlExecutor) -> list[Product]:
    try:
        rows = executor.select(ProductTable, "select * from product order by created_at")
    except SQLAlchemyError as e:
        raise SelectError(f"Select: {e}") from e

    products = rows_to_records(rows, Product)
    log_summary("Products", (f"{p.id}:{p.name}" for p in products))
    return products


def create_spec(id: str, weight: int, product_id: str, executor: SqlExecutor) -> None:
    try:
        executor.insert(SpecTable(id=id, weight=weight, product_id=product_id))
    except SQLAlchemyError as e:
        raise InsertError(f"Insert: {e}") from e


def find_specs(executor: SqlExecutor) -> list[Spec]:
    try:
        rows = executor.select(SpecTable, "select * from spec order by weight")
    except SQLAlchemyError as e:
        raise SelectError(f"Select: {e}") from e

    specs = rows_to_records(rows, Spec)
    log_summary("Specs", (f"{s.id}:{s.weight}" for s in specs))
    return specs


def create_image(id: str, url: str, product_id: str, executor: SqlExecutor) -> None:
    try:
        executor.insert(ImageTable(id=id, url=url, product_id=product_id))
    except SQLAlchemyError as e:
        raise InsertError(f"Insert: {e}") from e


def find_images(executor: SqlExecutor) -> list[Image]:
    try:
        rows = executor.select(ImageTable, "select * from image order by url")
    except SQLAlchemyError as e:
        raise SelectError(f"Select: {e}") from e

    images = rows_to_records(rows, Image)
    log_summary("Images", (f"{i.id}:{i.url}" for i in images))
    return images


def find_specs_heavier_than(weight: int, executor: SqlExecutor) -> list[Spec]:
    """Named-parameter query, one log line per spec."""
    try:
        rows = executor.query(
            "select * from spec where weight > :weight order by weight", weight=weight
        )
    except SQLAlchemyError as e:
        raise SelectError(f"NamedQuery: {e}") from e

    specs = rows_to_records(rows, Spec)
    for spec in specs:
        logger.info("Spec: {}", spec)
    return specs


def create_and_rename(mapper: DataMapper, new_id: str, new_name: str, id: str, name: str) -> None:
    """Insert one product and rename another in a single transaction."""
    with mapper.begin() as tx:
        create_product(new_id, new_name, tx)

        try:
            row = tx.get(ProductTable, id)
        except SQLAlchemyError as e:
            raise TransactionError(f"Get: {e}") from e
        if row is None:
            raise TransactionError(f"Get: product {id!r} not found")

        row.name = name
        row.updated_at = utcnow()
        try:
            tx.update(row)
            tx.commit()
        except SQLAlchemyError as e:
            raise TransactionError(f"Update: {e}") from e


def join_product_specs(executor: SqlExecutor, registry: FieldRegistry) -> list[ProductSpec]:
    fields = registry.join_fields(PRODUCT_SPEC_ALIASES)
    try:
        rows = executor.query(f"SELECT {fields} FROM product p JOIN spec s ON p.id = s.product_id")
    except SQLAlchemyError as e:
        raise SelectError(f"Join 1-1: {e}") from e

    joined = registry.scan_joined(rows, PRODUCT_SPEC_ALIASES, ProductSpec)
    for ps in joined:
        logger.info("{} -- {}", ps.product, ps.spec)
    return joined


def join_product_images(executor: SqlExecutor, registry: FieldRegistry) -> list[ProductImage]:
    fields = registry.join_fields(PRODUCT_IMAGE_ALIASES)
    try:
        rows = executor.query(f"SELECT {fields} FROM product p JOIN image i ON p.id = i.product_id")
    except SQLAlchemyError as e:
        raise SelectError(f"Join 1-N: {e}") from e

    joined = registry.scan_joined(rows, PRODUCT_IMAGE_ALIASES, ProductImage)
    for pi in joined:
        logger.info("{} -- {}", pi.product, pi.image)
    return joined


def run(db: DbSessionService, collections: Sequence[str]) -> None:
    """Run the full demo against an open database."""
    mapper = DataMapper(db)
    registry = FieldRegistry(db.naming).register(Product, Spec, Image)

    logger.info("Settings: {}", db.pool_settings())
    logger.info("Pool: {}", db.get_pool_status())

    mapper.truncate_tables(list(collections))

    create_product("foo", "Foo", mapper)
    create_product("bar", "Barr", mapper)
    find_products(mapper)

    create_and_rename(mapper, "zip", "Zip", "bar", "Bar")
    find_products(mapper)

    create_spec("fspec", 1, "foo", mapper)
    create_spec("bspec", 2, "bar", mapper)
    create_spec("zspec", 3, "zip", mapper)
    find_specs(mapper)

    find_specs_heavier_than(1, mapper)
    join_product_specs(mapper, registry)

    create_image("fgif", "foo.gif", "foo", mapper)
    create_image("fpng", "foo.png", "foo", mapper)
    find_images(mapper)

    join_product_images(mapper, registry)
