"""Catalog reference data — products, agencies and each agency's assortment.

Product and agency master data is owned by the head office's catalog screens;
this context only reads it. Drafts copy a product's name and price when they
are created, and orders copy the agency name, so later catalog edits never
rewrite history.

An agency may only draft products the head office has put in its assortment.
"""

from datetime import date

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Date, HasMany, Identifier, Integer, String

from supplychain.domain import supplychain
from supplychain.errors import NotFoundError


@supplychain.aggregate
class Product:
    name = String(required=True, max_length=255)
    code = String(max_length=50)
    category = String(max_length=100)
    unit_price = Integer(required=True, min_value=0)
    active = Boolean(default=True)


@supplychain.entity(part_of="Agency")
class AssortmentItem:
    """A product the agency stocks, with the day it entered the assortment."""

    product_id = Identifier(required=True)
    stocked_on = Date()


@supplychain.aggregate
class Agency:
    name = String(required=True, max_length=255)
    code = String(max_length=50)
    assortment = HasMany(AssortmentItem)

    def carries(self, product_id) -> bool:
        return any(str(item.product_id) == str(product_id) for item in self.assortment)

    def stock(self, product_ids):
        """Add products to the assortment; ones already carried are left alone."""
        for product_id in product_ids:
            if not self.carries(product_id):
                self.add_assortment(AssortmentItem(product_id=str(product_id), stocked_on=date.today()))

    def unstock(self, product_ids):
        wanted = {str(product_id) for product_id in product_ids}
        for item in [i for i in self.assortment if str(i.product_id) in wanted]:
            self.remove_assortment(item)


@supplychain.repository(part_of=Product)
class ProductRepository:
    def orderable(self, product_id) -> Product:
        """Return the product if it exists and can still be drafted."""
        try:
            product = self.get(str(product_id))
        except ObjectNotFoundError as exc:
            raise NotFoundError(f"Product {product_id} is not in the catalog") from exc
        if not product.active:
            raise NotFoundError(f"Product {product_id} is no longer orderable")
        return product


@supplychain.repository(part_of=Agency)
class AgencyRepository:
    def named(self, agency_id) -> Agency:
        try:
            return self.get(str(agency_id))
        except ObjectNotFoundError as exc:
            raise NotFoundError(f"Agency {agency_id} does not exist") from exc
