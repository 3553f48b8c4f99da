"""Product catalog for the cart engine"""

from typing import Optional

from ..models.cart import CartItem, Variant
from ..models.product import Product, ProductCategory

# Seed catalog, prices in paise
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Whey Protein Isolate",
        description="Cold-filtered whey isolate with 27g protein per scoop. Low fat, low lactose.",
        price=249900,
        category=ProductCategory.PROTEIN,
        sku="TSH-WPI-1KG",
        images=["/images/products/whey-isolate.jpg"],
        variants=[Variant(size="1kg", flavor="chocolate"), Variant(size="2kg", flavor="chocolate")],
        stock_quantity=80,
    ),
    "prod-002": Product(
        id="prod-002",
        name="Plant Protein Blend",
        description="Pea and brown rice protein with a complete amino acid profile.",
        price=189900,
        category=ProductCategory.PROTEIN,
        sku="TSH-PPB-1KG",
        images=["/images/products/plant-protein.jpg"],
        variants=[Variant(size="1kg", flavor="vanilla")],
        stock_quantity=60,
    ),
    "prod-003": Product(
        id="prod-003",
        name="Millet Protein Bar",
        description="Ragi and jowar bar with 15g protein. No added sugar.",
        price=8000,
        category=ProductCategory.SNACKS,
        sku="TSH-MPB-60G",
        images=["/images/products/millet-bar.jpg"],
        variants=[Variant(flavor="peanut butter"), Variant(flavor="dark cocoa")],
        stock_quantity=300,
    ),
    "prod-004": Product(
        id="prod-004",
        name="Roasted Chana",
        description="Lightly salted roasted chickpeas. A high-protein desi snack.",
        price=12000,
        category=ProductCategory.SNACKS,
        sku="TSH-RCH-200G",
        images=["/images/products/roasted-chana.jpg"],
        stock_quantity=150,
    ),
    "prod-005": Product(
        id="prod-005",
        name="Creatine Monohydrate",
        description="Micronised creatine monohydrate, 5g per serving. Unflavoured.",
        price=99900,
        category=ProductCategory.SUPPLEMENTS,
        sku="TSH-CRM-250G",
        images=["/images/products/creatine.jpg"],
        variants=[Variant(size="250g")],
        stock_quantity=120,
    ),
    "prod-006": Product(
        id="prod-006",
        name="Vitamin D3 + K2",
        description="2000 IU vitamin D3 with MK-7 for bone and immune support.",
        price=54900,
        category=ProductCategory.SUPPLEMENTS,
        sku="TSH-D3K2-60",
        images=["/images/products/vitamin-d3.jpg"],
        stock_quantity=0,
        in_stock=False,
    ),
    "prod-007": Product(
        id="prod-007",
        name="Protein Cold Coffee",
        description="Ready-to-drink cold coffee with 20g protein per bottle.",
        price=15000,
        category=ProductCategory.BEVERAGES,
        sku="TSH-PCC-250ML",
        images=["/images/products/cold-coffee.jpg"],
        variants=[Variant(size="250ml")],
        stock_quantity=200,
    ),
}


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self):
        self.products = PRODUCTS.copy()

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[ProductCategory] = None,
        in_stock_only: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        if in_stock_only:
            results = [p for p in results if p.in_stock and p.stock_quantity > 0]

        total = len(results)
        return results[offset : offset + limit], total


def create_cart_item_from_product(
    product: Product,
    quantity: int = 1,
    variant: Optional[Variant] = None,
) -> CartItem:
    """Build a cart line from a catalog product, defaulting to its first variant"""
    if variant is None and product.variants:
        variant = product.variants[0]
    return CartItem(
        product_id=product.id,
        name=product.name,
        image=product.image,
        unit_price=product.price,
        quantity=quantity,
        variant=variant,
    )


# Singleton instance
product_db = ProductDatabase()
