"""Reference data registration — commands and handler.

Loads catalog rows mirrored from the head office's catalog so drafts and
orders have products and agencies to point at, and keeps each agency's
assortment in step with the head office's assignments.
"""

import json

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from supplychain.catalog.catalog import Agency, Product
from supplychain.domain import supplychain


@supplychain.command(part_of="Product")
class RegisterProduct:
    product_id = Identifier()
    name = String(required=True, max_length=255)
    code = String(max_length=50)
    category = String(max_length=100)
    unit_price = Integer(required=True, min_value=0)
    active = Boolean(default=True)


@supplychain.command(part_of="Agency")
class RegisterAgency:
    agency_id = Identifier()
    name = String(required=True, max_length=255)
    code = String(max_length=50)


@supplychain.command_handler(part_of=Product)
class RegisterProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        values = dict(
            name=command.name,
            code=command.code,
            category=command.category,
            unit_price=command.unit_price,
            active=command.active if command.active is not None else True,
        )
        if command.product_id:
            values["id"] = str(command.product_id)
        product = Product(**values)
        current_domain.repository_for(Product).add(product)
        return str(product.id)


@supplychain.command_handler(part_of=Agency)
class RegisterAgencyHandler:
    @handle(RegisterAgency)
    def register_agency(self, command):
        values = dict(name=command.name, code=command.code)
        if command.agency_id:
            values["id"] = str(command.agency_id)
        agency = Agency(**values)
        current_domain.repository_for(Agency).add(agency)
        return str(agency.id)


@supplychain.command(part_of="Agency")
class ChangeAssortment:
    agency_id = Identifier(required=True)
    product_ids = Text(required=True)  # JSON: list of product ids
    withdraw = Boolean(default=False)


@supplychain.command_handler(part_of=Agency)
class ChangeAssortmentHandler:
    @handle(ChangeAssortment)
    def change_assortment(self, command):
        product_ids = [str(i) for i in json.loads(command.product_ids)]
        agency = current_domain.repository_for(Agency).named(command.agency_id)
        if command.withdraw:
            agency.unstock(product_ids)
        else:
            products = current_domain.repository_for(Product)
            for product_id in product_ids:
                products.orderable(product_id)
            agency.stock(product_ids)
        current_domain.repository_for(Agency).add(agency)
        return len(agency.assortment)
