from datetime import datetime

from kasir.models import (
    BestSellingProduct,
    Category,
    Product,
    ProductCategory,
    Report,
    Transaction,
    TransactionDetail,
)


def test_product_dict_without_category():
    product = Product(id=1, name="Aqua", price=3000, stock=10)

    assert product.to_dict() == {
        "id": 1,
        "name": "Aqua",
        "price": 3000,
        "stock": 10,
        "category_id": None,
    }


def test_product_dict_with_category():
    product = Product(id=1, name="Aqua", price=3000, stock=10, category_id=2,
                      category=ProductCategory(name="Minuman", description="Botol"))

    data = product.to_dict()

    assert data["category_id"] == 2
    assert data["category"] == {"name": "Minuman", "description": "Botol"}


def test_product_copy_is_deep_for_category():
    product = Product(id=1, name="Aqua", category=ProductCategory(name="Minuman"))

    clone = product.copy()
    clone.category.name = "changed"

    assert product.category.name == "Minuman"


def test_transaction_dict():
    tx = Transaction(
        id=4,
        total_amount=7000,
        created_at=datetime(2024, 1, 15, 10, 30, 0, 999),
        details=[TransactionDetail(product_id=1, product_name="Indomie", quantity=2, price=3500,
                                   subtotal=7000, id=1, transaction_id=4)],
    )

    assert tx.to_dict() == {
        "id": 4,
        "total_amount": 7000,
        "created_at": "2024-01-15T10:30:00",
        "details": [{
            "id": 1,
            "transaction_id": 4,
            "product_id": 1,
            "product_name": "Indomie",
            "quantity": 2,
            "price": 3500,
            "subtotal": 7000,
        }],
    }


def test_transaction_copy_copies_details():
    tx = Transaction(details=[TransactionDetail(product_id=1, product_name="A", quantity=1, price=1, subtotal=1)])

    clone = tx.copy()
    clone.details[0].quantity = 9
    clone.details.append(clone.details[0])

    assert len(tx.details) == 1
    assert tx.details[0].quantity == 1


def test_report_dict_uses_wire_names():
    report = Report(total_revenue=45000, total_transactions=5,
                    best_selling_product=BestSellingProduct(name="Indomie Goreng", quantity_sold=12))

    assert report.to_dict() == {
        "total_revenue": 45000,
        "total_transaksi": 5,
        "produk_terlaris": {"nama": "Indomie Goreng", "qty_terjual": 12},
    }


def test_category_copy():
    category = Category(id=1, name="A")
    clone = category.copy()
    clone.name = "B"

    assert category.name == "A"
