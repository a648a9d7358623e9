import logging
from uuid import uuid4

from enums.line_kind import LineKind
from exceptions.bundle import InvalidBundleException, IncompleteCustomBundleException
from exceptions.cart import CartLineNotFoundException, CustomBundleNotAllowedException
from models.bundle import BundleDTO, CustomBundleSelectionDTO
from models.cart import CartLineDTO, CartTotalsDTO
from models.discount import DiscountDTO, DiscountApplicationDTO
from models.item import InventoryItemDTO
from services.bundle_availability import BundleAvailabilityCalculator
from services.discount import DiscountEngine
from services.feed import CatalogFeeds
from services.stock_ledger import StockLedger
from utils.money import round_money

logger = logging.getLogger(__name__)


class CartAggregator:
    """
    The register's in-progress cart.

    Line lifecycle: absent → present(qty=1) → present(qty=n) → absent.
    A line whose quantity reaches 0 is removed; there is no zero-quantity line.

    Every increase is checked against a ceiling recomputed from the live
    catalog snapshot:
    - item line: on-hand stock minus what other item lines already hold
    - fixed bundle line: bundle availability from raw inventory
    - custom bundle line: availability of its picked components

    Refused increases are no-ops that return False. Exactly one discount can
    be applied at a time; its amount is recomputed against the current
    subtotal on every read.
    """

    def __init__(self, catalog: CatalogFeeds):
        self.catalog = catalog
        self._lines: list[CartLineDTO] = []
        self._discount: DiscountDTO | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def lines(self) -> list[CartLineDTO]:
        return [line.model_copy(deep=True) for line in self._lines]

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def applied_discount(self) -> DiscountDTO | None:
        return self._discount

    def category_ids(self) -> list[str]:
        """Categories of the plain item lines; bundles carry none."""
        return sorted({
            line.category_id for line in self._lines
            if line.kind == LineKind.ITEM and line.category_id
        })

    def _ledger(self) -> StockLedger:
        return StockLedger(self.catalog.inventory.snapshot)

    def _find(self, line_id: str, kind: LineKind | None = None) -> CartLineDTO | None:
        for line in self._lines:
            if line.id == line_id and (kind is None or line.kind == kind):
                return line
        return None

    def get_line(self, line_id: str, kind: LineKind | None = None) -> CartLineDTO:
        line = self._find(line_id, kind)
        if line is None:
            raise CartLineNotFoundException(line_id)
        return line.model_copy(deep=True)

    def ceiling_for(self, line: CartLineDTO) -> int:
        """Fresh maximum quantity for a line."""
        inventory = self.catalog.inventory.snapshot

        if line.kind == LineKind.ITEM:
            return self._ledger().line_ceiling(line.id, self._lines, exclude_line_id=line.id)

        if line.is_custom:
            stock_by_id = BundleAvailabilityCalculator.stock_map(inventory)
            return BundleAvailabilityCalculator.components_availability(line.components, stock_by_id)

        bundle = self.catalog.bundle(line.id)
        if bundle is None:
            logger.warning(f"Bundle {line.id} is in the cart but no longer in the catalog")
            return 0
        return BundleAvailabilityCalculator.availability(bundle, inventory)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_line(self, sellable: InventoryItemDTO | BundleDTO) -> bool:
        """
        Add one unit of an item or a fixed bundle.

        Returns:
            True if the cart changed, False when the stock ceiling was reached

        Raises:
            CustomBundleNotAllowedException: For a custom bundle template, which
                must go through CustomBundleSelector and add_custom_bundle()
        """
        if isinstance(sellable, BundleDTO):
            return self._add_bundle(sellable)
        return self._add_item(sellable)

    def _add_item(self, item: InventoryItemDTO) -> bool:
        # The catalog holds the current price and cost; fall back to the caller's copy
        item = self.catalog.item(item.id) or item
        available = self._ledger().available_stock(item.id, self._lines)
        if available <= 0:
            logger.debug(f"Item {item.id} not added: no stock left for this cart")
            return False

        existing = self._find(item.id, LineKind.ITEM)
        if existing:
            existing.quantity += 1
            return True

        self._lines.append(CartLineDTO(
            id=item.id,
            kind=LineKind.ITEM,
            name=item.name,
            unit_price=item.price,
            unit_cost=item.cost,
            quantity=1,
            original_stock=item.stock,
            category_id=item.category_id
        ))
        return True

    def _add_bundle(self, bundle: BundleDTO) -> bool:
        if bundle.is_custom:
            raise CustomBundleNotAllowedException(bundle.id)

        # The catalog holds the current recipe; fall back to the caller's copy
        live_bundle = self.catalog.bundle(bundle.id) or bundle
        availability = BundleAvailabilityCalculator.availability(live_bundle, self.catalog.inventory.snapshot)
        if availability <= 0:
            logger.debug(f"Bundle {bundle.id} not added: unavailable")
            return False

        existing = self._find(bundle.id, LineKind.BUNDLE)
        if existing:
            if existing.quantity >= availability:
                logger.debug(f"Bundle {bundle.id} not added: ceiling {availability} reached")
                return False
            existing.quantity += 1
            return True

        self._lines.append(CartLineDTO(
            id=live_bundle.id,
            kind=LineKind.BUNDLE,
            name=live_bundle.name,
            unit_price=live_bundle.price,
            quantity=1,
            original_stock=availability,
            bundle_id=live_bundle.id,
            components=[c.model_copy() for c in live_bundle.components]
        ))
        return True

    def add_custom_bundle(self, bundle: BundleDTO, selection: CustomBundleSelectionDTO) -> CartLineDTO:
        """
        Add a finished custom bundle selection as its own cart line.

        Each confirmed selection becomes a separate line with a synthesized id,
        since two customers' picks of the same template differ.

        Raises:
            InvalidBundleException: If the bundle is not custom or the selection belongs to another bundle
            IncompleteCustomBundleException: If the selection does not hold exactly max_pieces
        """
        if not bundle.is_custom:
            raise InvalidBundleException(bundle.id, "bundle is not a custom bundle")
        if selection.bundle_id != bundle.id:
            raise InvalidBundleException(bundle.id, f"selection was made for bundle {selection.bundle_id}")
        if selection.total_pieces != bundle.max_pieces:
            raise IncompleteCustomBundleException(bundle.id, selection.total_pieces, bundle.max_pieces)

        stock_by_id = BundleAvailabilityCalculator.stock_map(self.catalog.inventory.snapshot)
        line = CartLineDTO(
            id=f"{bundle.id}_custom_{uuid4().hex[:12]}",
            kind=LineKind.BUNDLE,
            name=bundle.name,
            unit_price=bundle.price,
            unit_cost=selection.total_cost,
            quantity=1,
            original_stock=BundleAvailabilityCalculator.components_availability(selection.components, stock_by_id),
            bundle_id=bundle.id,
            is_custom=True,
            components=[c.model_copy() for c in selection.components]
        )
        self._lines.append(line)
        logger.debug(f"Custom bundle line {line.id} added ({selection.total_pieces} pieces)")
        return line.model_copy(deep=True)

    def set_quantity(self, line_id: str, delta: int, kind: LineKind | None = None) -> bool:
        """
        Change a line's quantity by delta.

        new_qty = max(0, qty + delta). Increases are refused (line unchanged)
        when new_qty exceeds the freshly recomputed ceiling. Reaching 0 removes
        the line.

        Returns:
            True if the cart changed (or delta is 0), False if the increase was refused

        Raises:
            CartLineNotFoundException: If no line has this id
        """
        line = self._find(line_id, kind)
        if line is None:
            raise CartLineNotFoundException(line_id)

        new_quantity = max(0, line.quantity + delta)
        if delta > 0:
            ceiling = self.ceiling_for(line)
            if new_quantity > ceiling:
                logger.debug(f"Line {line_id}: increase to {new_quantity} refused, ceiling {ceiling}")
                return False

        if new_quantity == 0:
            self._lines.remove(line)
        else:
            line.quantity = new_quantity
        return True

    def remove_line(self, line_id: str, kind: LineKind | None = None) -> None:
        line = self._find(line_id, kind)
        if line is None:
            raise CartLineNotFoundException(line_id)
        self._lines.remove(line)

    def apply_discount(self, code: str | None) -> DiscountApplicationDTO:
        """
        Apply a code, replacing any previously applied discount.

        An unknown code leaves the cart without a discount. Applying the same
        code again gives the same amount; discounts never compound.
        """
        application = DiscountEngine.apply(
            code,
            self.catalog.discounts.snapshot,
            self.subtotal(),
            self.category_ids()
        )
        self._discount = application.discount
        if application.discount:
            logger.info(f"Discount {application.discount.code} applied "
                        f"(amount={application.amount:.2f}, applicable={application.applicable})")
        return application

    def clear_discount(self) -> None:
        self._discount = None

    def clear(self) -> None:
        """Empty the cart and drop the discount together."""
        self._lines, self._discount = [], None

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def subtotal(self) -> float:
        return round_money(sum(line.line_total for line in self._lines))

    def discount_amount(self) -> float:
        if self._discount is None:
            return 0.0
        return DiscountEngine.calculate(self._discount, self.subtotal(), self.category_ids())

    def total(self) -> float:
        return round_money(max(0.0, self.subtotal() - self.discount_amount()))

    def totals(self) -> CartTotalsDTO:
        subtotal = self.subtotal()
        category_ids = self.category_ids()
        discount_amount = 0.0
        applicable = False
        if self._discount is not None:
            applicable = DiscountEngine.is_applicable(self._discount, category_ids)
            discount_amount = DiscountEngine.calculate(self._discount, subtotal, category_ids)

        return CartTotalsDTO(
            subtotal=subtotal,
            discount_code=self._discount.code if self._discount else None,
            discount_amount=discount_amount,
            discount_applicable=applicable,
            total=round_money(max(0.0, subtotal - discount_amount)),
            item_count=self.item_count,
            line_count=self.line_count
        )
