"""Demo program for the query-builder layer."""

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime

from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from src.rel.builder.session import BuilderSession, BuilderTx, Inserter
from src.rel.core.projection import CompositeT, FieldRegistry
from src.rel.core.report import log_summary
from src.rel.core.services.database.db_session import DbSessionService
from src.rel.entities import Image, Product, ProductImage, ProductSpec, Spec
from src.rel.entities._base import utcnow
from src.rel.errors import InsertError, SelectError, TransactionError, TruncateError


def truncate(session: BuilderSession, collections: Sequence[str]) -> None:
    for name in collections:
        try:
            session.collection(name).truncate()
        except LookupError as e:
            raise TruncateError(f"Truncate: {e}") from e


def create_product(id: str, name: str, inserter: Inserter, now: datetime | None = None) -> None:
    now = now or utcnow()
    product = Product(id=id, name=name, created_at=now, updated_at=now)
    try:
        inserter.values(product).exec()
    except SQLAlchemyError as e:
        raise InsertError(f"InsertInto: {e}") from e


def find_products(session: BuilderSession) -> list[Product]:
    try:
        products = session.collection("product").find().order_by("created_at").all(Product)
    except SQLAlchemyError as e:
        raise SelectError(f"Find: {e}") from e

    log_summary("Products", (f"{p.id}:{p.name}" for p in products))
    return products


def create_spec(id: str, weight: int, product_id: str, inserter: Inserter) -> None:
    try:
        inserter.values(Spec(id=id, weight=weight, product_id=product_id)).exec()
    except SQLAlchemyError as e:
        raise InsertError(f"InsertInto: {e}") from e


def find_specs(session: BuilderSession) -> list[Spec]:
    try:
        specs = session.collection("spec").find().order_by("weight").all(Spec)
    except SQLAlchemyError as e:
        raise SelectError(f"Find: {e}") from e

    log_summary("Specs", (f"{s.id}:{s.weight}" for s in specs))
    return specs


def create_image(id: str, url: str, product_id: str, inserter: Inserter) -> None:
    try:
        inserter.values(Image(id=id, url=url, product_id=product_id)).exec()
    except SQLAlchemyError as e:
        raise InsertError(f"InsertInto: {e}") from e


def find_images(session: BuilderSession) -> list[Image]:
    try:
        images = session.collection("image").find().order_by("url").all(Image)
    except SQLAlchemyError as e:
        raise SelectError(f"Find: {e}") from e

    log_summary("Images", (f"{i.id}:{i.url}" for i in images))
    return images


def create_and_rename(session: BuilderSession, new_id: str, new_name: str, id: str, name: str) -> None:
    """Insert one product and rename another inside ``session.tx``."""

    def work(tx: BuilderTx) -> None:
        create_product(new_id, new_name, tx.insert_into("product"))

        try:
            updated = tx.update("product").set(name=name, updated_at=utcnow()).where("id", id).exec()
        except SQLAlchemyError as e:
            raise TransactionError(f"Update: {e}") from e
        if updated != 1:
            raise TransactionError(f"Update: product {id!r} not found")

    try:
        session.tx(work)
    except SQLAlchemyError as e:
        raise TransactionError(f"Commit: {e}") from e


def join(
    session: BuilderSession,
    registry: FieldRegistry,
    sql: str,
    aliases: Mapping[str, type[BaseModel]],
    composite: Callable[..., CompositeT],
) -> list[CompositeT]:
    try:
        rows = session.query(sql.format(fields=registry.join_fields(aliases)))
    except SQLAlchemyError as e:
        raise SelectError(f"Join: {e}") from e

    joined = registry.scan_joined(rows, aliases, composite)
    for left, right in joined:
        logger.info("{} -- {}", left, right)
    return joined


def run(db: DbSessionService, collections: Sequence[str]) -> None:
    """Run the full demo against an open database."""
    session = BuilderSession(db.engine, db.naming)
    registry = FieldRegistry(db.naming).register(Product, Spec, Image)

    logger.info("Settings: {}", db.pool_settings())

    truncate(session, collections)

    create_product("foo", "Foo", session.insert_into("product"))
    create_product("bar", "Barr", session.insert_into("product"))
    find_products(session)

    create_and_rename(session, "zip", "Zip", "bar", "Bar")
    find_products(session)

    create_spec("fspec", 1, "foo", session.insert_into("spec"))
    create_spec("bspec", 2, "bar", session.insert_into("spec"))
    create_spec("zspec", 3, "zip", session.insert_into("spec"))
    find_specs(session)

    join(
        session,
        registry,
        "SELECT {fields} FROM product p JOIN spec s ON p.id = s.product_id",
        {"p": Product, "s": Spec},
        ProductSpec,
    )

    create_image("fgif", "foo.gif", "foo", session.insert_into("image"))
    create_image("fpng", "foo.png", "foo", session.insert_into("image"))
    find_images(session)

    join(
        session,
        registry,
        "SELECT {fields} FROM product p JOIN image i ON p.id = i.product_id",
        {"p": Product, "i": Image},
        ProductImage,
    )
