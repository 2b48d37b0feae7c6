from __future__ import annotations

from ..extensions import db
from .entities import Category, Product, ProductCategory, Transaction, TransactionDetail


class CategoryRow(db.Model):
    __tablename__ = "categories"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<CategoryRow id={self.id} name={self.name!r}>"

    def to_entity(self) -> Category:
        return Category(id=self.id, name=self.name, description=self.description or "")


class ProductRow(db.Model):
    """
    Product storage.

    category_id is a nullable FK; deleting a category leaves products in place
    with the reference cleared.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    # Whole currency units (rupiah)
    price = db.Column(db.Integer, nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)

    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    category = db.relationship("CategoryRow", lazy="joined")

    def __repr__(self) -> str:
        return f"<ProductRow id={self.id} name={self.name!r} stock={self.stock}>"

    def to_entity(self) -> Product:
        product = Product(
            id=self.id,
            name=self.name,
            price=self.price,
            stock=self.stock,
            category_id=self.category_id,
        )
        if self.category is not None:
            product.category = ProductCategory(
                name=self.category.name,
                description=self.category.description or "",
            )
        return product


class TransactionRow(db.Model):
    __tablename__ = "transactions"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = db.Column(db.Integer, primary_key=True)
    total_amount = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, index=True)

    details = db.relationship(
        "TransactionDetailRow",
        backref="transaction",
        order_by="TransactionDetailRow.line_number",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<TransactionRow id={self.id} total_amount={self.total_amount}>"

    def to_entity(self) -> Transaction:
        return Transaction(
            id=self.id,
            total_amount=self.total_amount,
            created_at=self.created_at,
            details=[d.to_entity() for d in self.details],
        )


class TransactionDetailRow(db.Model):
    __tablename__ = "transaction_details"
    __table_args__ = (
        db.UniqueConstraint("transaction_id", "line_number", name="uq_transaction_details_line"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(
        db.Integer,
        db.ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # 1-based position within the owning transaction; exposed as the detail id
    line_number = db.Column(db.Integer, nullable=False)

    # No FK: details keep their snapshot after the product is deleted
    product_id = db.Column(db.Integer, nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Integer, nullable=False)
    subtotal = db.Column(db.Integer, nullable=False)

    def to_entity(self) -> TransactionDetail:
        return TransactionDetail(
            id=self.line_number,
            transaction_id=self.transaction_id,
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            price=self.price,
            subtotal=self.subtotal,
        )
