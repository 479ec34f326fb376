"""
Cart service layer
Handles shopping cart business logic
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
import logging
import uuid

from shopfront.models import Cart, CartItem, Product
from shopfront.core.exceptions import (
    NotFoundException,
    BadRequestException,
    InsufficientStockException,
    ProductUnavailableException
)
from shopfront.services.pricing import ZERO, to_money
from .schemas import CartItemResponse, CartResponse

logger = logging.getLogger(__name__)

class CartService:
    """Shopping cart service; never writes stock"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_cart(self, user_id: uuid.UUID) -> Optional[Cart]:
        """Cart with items and their live products, or None"""
        result = await self.db.execute(
            select(Cart)
            .options(selectinload(Cart.items).selectinload(CartItem.product))
            .where(Cart.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: uuid.UUID) -> Cart:
        """
        Get the user's cart, creating it on first touch

        Two first touches racing each other both try to insert; the loser
        hits the unique user_id constraint and reads the winner's cart.
        """
        cart = await self.load_cart(user_id)
        if cart:
            return cart

        self.db.add(Cart(user_id=user_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.debug(f"Cart for user {user_id} created concurrently")

        cart = await self.load_cart(user_id)
        if cart is None:
            raise NotFoundException("Cart not found")
        return cart

    async def get_cart(self, user_id: uuid.UUID) -> CartResponse:
        """
        Get cart view

        Prices, subtotals and availability are computed from the current
        product rows on every read.
        """
        cart = await self.get_or_create(user_id)
        return self.build_cart_view(cart)

    async def add_item(
        self,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int
    ) -> CartResponse:
        """
        Add item to cart, merging with an existing line for the product

        Raises:
            NotFoundException: If product not found
            ProductUnavailableException: If product inactive or out of stock
            InsufficientStockException: If the merged quantity exceeds stock
        """
        if quantity <= 0:
            raise BadRequestException("Quantity must be positive", error_code="INVALID_QUANTITY")

        product = await self._get_product(product_id)
        if not product.active or not product.is_in_stock:
            raise ProductUnavailableException(f"Product is not available: {product.name}")

        cart = await self.get_or_create(user_id)
        existing_item = next((item for item in cart.items if item.product_id == product_id), None)

        new_quantity = quantity + (existing_item.quantity if existing_item else 0)
        if new_quantity > product.stock_quantity:
            raise InsufficientStockException(product.name, product.stock_quantity)

        if existing_item:
            existing_item.quantity = new_quantity
        else:
            self.db.add(CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity))

        await self.db.commit()
        logger.info(f"User {user_id} cart: {product_id} quantity now {new_quantity}")

        return await self.get_cart(user_id)

    async def update_item_quantity(
        self,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        quantity: int
    ) -> CartResponse:
        """Set a line's quantity; zero or less removes the line"""
        cart = await self.get_or_create(user_id)
        item = self._find_item(cart, item_id)

        if quantity <= 0:
            await self.db.delete(item)
        else:
            product = item.product
            if not product.active:
                raise ProductUnavailableException(f"Product is not available: {product.name}")
            if quantity > product.stock_quantity:
                raise InsufficientStockException(product.name, product.stock_quantity)
            item.quantity = quantity

        await self.db.commit()
        return await self.get_cart(user_id)

    async def remove_item(self, user_id: uuid.UUID, item_id: uuid.UUID) -> CartResponse:
        """
        Remove a line from the cart

        Raises:
            NotFoundException: If the item is not in this user's cart
        """
        cart = await self.get_or_create(user_id)
        item = self._find_item(cart, item_id)

        await self.db.delete(item)
        await self.db.commit()
        return await self.get_cart(user_id)

    async def clear(self, user_id: uuid.UUID) -> None:
        """Remove every line; clearing an empty or missing cart is a no-op"""
        cart = await self.load_cart(user_id)
        if cart is None:
            return

        await self.remove_all_items(cart.id)
        await self.db.commit()

    async def remove_all_items(self, cart_id: uuid.UUID) -> None:
        """Delete every line of a cart inside the caller's transaction"""
        await self.db.execute(delete(CartItem).where(CartItem.cart_id == cart_id))

    async def _get_product(self, product_id: uuid.UUID) -> Product:
        result = await self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        product = result.scalar_one_or_none()
        if not product:
            raise NotFoundException("Product not found")
        return product

    @staticmethod
    def _find_item(cart: Cart, item_id: uuid.UUID) -> CartItem:
        for item in cart.items:
            if item.id == item_id:
                return item
        raise NotFoundException("Cart item not found")

    @staticmethod
    def build_cart_view(cart: Cart) -> CartResponse:
        items = []
        total_price = ZERO

        for item in cart.items:
            product = item.product
            subtotal = item.subtotal
            total_price += subtotal

            items.append(CartItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=product.name,
                quantity=item.quantity,
                created_at=item.created_at,
                unit_price=item.unit_price,
                subtotal=subtotal,
                in_stock=product.active and product.is_in_stock,
                available_stock=product.stock_quantity
            ))

        return CartResponse(
            id=cart.id,
            user_id=cart.user_id,
            items=items,
            total_items=cart.total_items,
            total_price=to_money(total_price)
        )
