from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, InternalError, InvalidRequestError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.utils.settings import StoreConfig, get_config
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

NO_CART = "User does not have a cart"
NO_CART_FOR_UPDATE = "User does not have a cart. Use POST to create cart and add a product"
PRODUCT_NOT_IN_DB = "Product doesn't exist in database"
PRODUCT_ALREADY_IN_CART = "Product already in cart. Use the cart sidebar to update or remove product from cart"
PRODUCT_NOT_IN_CART = "Product not in cart"
CART_EMPTY = "User's cart doesn't have any product"
ADDRESS_NOT_SET = "Address is not set"
INSUFFICIENT_BALANCE = "Wallet balance is insufficient"


class CartService:
    """
    Use cases for the cart domain.
    query (get) only reads, commands (add, update, delete, checkout) run under
    the per-user lock and bump the cart version.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        config: StoreConfig | None = None,
    ):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.lock_service = lock_service
        self.config = config or get_config()

    # =====================================================
    # QUERY
    # =====================================================
    def get_cart_by_user(self, user: UserModel) -> CartModel:
        cart = self.repo.get_cart_by_user(user.id)
        if not cart:
            raise NotFoundError(NO_CART)
        return cart

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_product_to_cart(self, user: UserModel, product_id: int, quantity: int) -> CartModel:
        product = self.products.get_product(product_id)
        if not product:
            raise InvalidRequestError(PRODUCT_NOT_IN_DB)

        with self.lock_service.user_lock(user.id):
            cart = self.repo.get_cart_by_user(user.id)

            if not cart:
                return self._create_cart(user, CartItemModel.from_product(product, quantity))

            if self.repo.get_cart_item(cart, product_id):
                raise InvalidRequestError(PRODUCT_ALREADY_IN_CART)

            logger.info(f"Adding product {product_id} x{quantity} to cart {cart.id}")
            self.repo.add_cart_item(cart, CartItemModel.from_product(product, quantity))
            self._commit_with_version(cart)

        return cart

    def update_product_in_cart(self, user: UserModel, product_id: int, quantity: int) -> CartModel:
        product = self.products.get_product(product_id)
        if not product:
            raise InvalidRequestError(PRODUCT_NOT_IN_DB)

        with self.lock_service.user_lock(user.id):
            cart = self.repo.get_cart_by_user(user.id)
            if not cart:
                raise InvalidRequestError(NO_CART_FOR_UPDATE)

            item = self.repo.get_cart_item(cart, product_id)
            if not item:
                raise InvalidRequestError(PRODUCT_NOT_IN_CART)

            logger.info(f"Updating product {product_id} in cart {cart.id}: {item.quantity} -> {quantity}")
            item.quantity = quantity
            self._commit_with_version(cart)

        return cart

    def delete_product_from_cart(self, user: UserModel, product_id: int) -> None:
        with self.lock_service.user_lock(user.id):
            cart = self.repo.get_cart_by_user(user.id)
            if not cart:
                raise InvalidRequestError(NO_CART)

            item = self.repo.get_cart_item(cart, product_id)
            if not item:
                raise InvalidRequestError(PRODUCT_NOT_IN_CART)

            logger.info(f"Removing product {product_id} from cart {cart.id}")
            self.repo.delete_cart_item(cart, item)
            self._commit_with_version(cart)

    def checkout(self, user: UserModel) -> CartModel:
        """
        Debit the wallet by the cart total and empty the cart.

        All checks run before anything is written. The debit and the
        clearing are committed in one transaction, so either both land
        or neither does.
        """
        with self.lock_service.user_lock(user.id):
            # latest wallet/address, another request may have committed
            self.users.refresh(user)

            cart = self.repo.get_cart_by_user(user.id)
            if not cart:
                raise NotFoundError(NO_CART)

            if not cart.items:
                raise InvalidRequestError(CART_EMPTY)

            total = cart.total

            if not user.has_set_non_default_address(self.config.default_address):
                raise InvalidRequestError(ADDRESS_NOT_SET)

            if Decimal(user.wallet_money) < total:
                raise InvalidRequestError(INSUFFICIENT_BALANCE)

            user.wallet_money = Decimal(user.wallet_money) - total
            self.repo.clear_cart_items(cart)
            self._commit_with_version(cart)

            logger.info(
                f"Checkout committed for user {user.id}: charged {total}, "
                f"wallet now {user.wallet_money}"
            )

        return cart

    # =====================================================
    # HELPERS
    # =====================================================
    def _create_cart(self, user: UserModel, item: CartItemModel) -> CartModel:
        try:
            cart = self.repo.create_cart(
                CartModel(
                    user_id=user.id,
                    payment_option=self.config.default_payment_option,
                    version=1,
                    items=[item],
                )
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Cart creation failed for user {user.id}: {e}")
            raise InternalError()

        if not cart or cart.id is None:
            raise InternalError()

        logger.info(f"Created cart {cart.id} for user {user.id}")
        return cart

    def _commit_with_version(self, cart: CartModel) -> None:
        # optimistic locking: UPDATE ... WHERE id = :id AND version = :old
        cart_id, old_version = cart.id, cart.version
        try:
            rowcount = self.repo.update_cart_version(
                cart_id=cart_id,
                old_version=old_version,
                new_data={"version": old_version + 1},
            )
            if rowcount == 0:
                self.repo.rollback()
                logger.warning(f"Version conflict on cart {cart_id} (expected {old_version})")
                raise ConflictError()

            self.repo.commit()
            self.repo.refresh(cart)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to persist cart {cart_id}: {e}")
            raise InternalError()
