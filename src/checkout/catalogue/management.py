"""Catalogue management: commands and handler.

Registration and restocking are administrative; `TakeStock` and `ReturnStock`
are issued by the catalogue reader on behalf of the order compiler.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from checkout.catalogue.product import Product
from checkout.domain import checkout


@checkout.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    product_type = String(max_length=50)
    thumbnail = String(max_length=1024)


@checkout.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@checkout.command(part_of="Product")
class TakeStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@checkout.command(part_of="Product")
class ReturnStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@checkout.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            stock=command.stock or 0,
            description=command.description,
            product_type=command.product_type,
            thumbnail=command.thumbnail,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)
        return product.stock

    @handle(TakeStock)
    def take_stock(self, command):
        """Decrement stock if enough is available; report whether it was taken."""
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if product.stock < command.quantity:
            return False
        product.take(command.quantity)
        repo.add(product)
        return True

    @handle(ReturnStock)
    def return_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)
