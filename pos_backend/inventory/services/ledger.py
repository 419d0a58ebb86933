# inventory/services/ledger.py

"""
STOCK LEDGER (INGREDIENTS)

Single write path for ingredient quantities.

RULES:
- Every quantity change is an immutable StockMovement row
- Ingredient.quantity is a projection: updated in the SAME transaction as
  the movement insert, never written anywhere else
- Ingredient row is locked (select_for_update) for the whole unit of work
- OUT movements use a conditional update (quantity >= requested) so a
  concurrent writer can never drive the projection below zero
- Only ADJUSTMENT/OUT with allow_negative=True may go below zero
  (recorded as negative_override on the movement)

ERRORS:
- Validation happens before any write
- DatabaseError is surfaced as PersistenceFailure after the atomic block
  has rolled back
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F, Q, Sum
from django.utils import timezone

from inventory.models import Ingredient, StockMovement
from inventory.services.costing import decide_cost
from inventory.services.exceptions import (
    IngredientNotFoundError,
    InsufficientStockError,
    InvalidQuantityError,
    MovementNotFoundError,
    PersistenceFailure,
    StockValidationError,
)

logger = logging.getLogger(__name__)

QTY_PLACES = Decimal("0.001")
ZERO_QTY = Decimal("0.000")
# largest value a DecimalField(max_digits=14, decimal_places=3) holds
QTY_MAX = Decimal("99999999999.999")

MovementType = StockMovement.MovementType
Direction = StockMovement.Direction


@dataclass(frozen=True)
class ProjectionDrift:
    ingredient_id: str
    ingredient_name: str
    recorded_quantity: Decimal
    ledger_quantity: Decimal
    repaired: bool

    @property
    def difference(self) -> Decimal:
        return self.ledger_quantity - self.recorded_quantity


# -----------------------------
# Normalizers
# -----------------------------
def _to_quantity(value, *, field: str = "quantity", allow_zero: bool = False) -> Decimal:
    if value is None or value == "":
        raise InvalidQuantityError(f"{field} is required", field=field)

    if isinstance(value, bool):
        # bool is an int subclass
        raise InvalidQuantityError(f"{field} must be a decimal number", field=field)

    try:
        qty = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidQuantityError(
            f"{field} must be a decimal number", field=field
        ) from exc

    if not qty.is_finite():
        raise InvalidQuantityError(f"{field} must be a decimal number", field=field)

    if abs(qty) > QTY_MAX:
        raise InvalidQuantityError(
            f"{field} cannot exceed {QTY_MAX}", field=field, value=value
        )

    if qty != qty.quantize(QTY_PLACES):
        raise InvalidQuantityError(
            f"{field} supports at most 3 decimal places", field=field, value=value
        )

    if qty < 0:
        raise InvalidQuantityError(
            f"{field} cannot be negative", field=field, value=value
        )

    if qty == 0 and not allow_zero:
        raise InvalidQuantityError(
            f"{field} must be greater than zero", field=field, value=value
        )

    return qty.quantize(QTY_PLACES)


def _to_movement_type(value) -> str:
    raw = (str(value or "")).strip().upper()
    if raw not in MovementType.values:
        raise StockValidationError(
            "movement_type must be one of: " + ", ".join(MovementType.values),
            field="movement_type",
            value=value,
        )
    return raw


def _resolve_direction(movement_type: str, direction) -> str:
    given = (str(direction or "")).strip().upper() or None
    if given is not None and given not in Direction.values:
        raise StockValidationError(
            "direction must be IN or OUT", field="direction", value=direction
        )

    implied = StockMovement.TYPE_TO_DIRECTION[movement_type]
    if implied is None:
        if given is None:
            raise StockValidationError(
                "ADJUSTMENT requires an explicit direction (IN or OUT)",
                field="direction",
            )
        return given

    if given is not None and given != implied:
        raise StockValidationError(
            f"{movement_type} movements are always {implied}",
            field="direction",
            value=direction,
        )
    return implied


def _actor(user) -> str:
    if user is None:
        return ""
    if isinstance(user, str):
        return user[:100]
    get_username = getattr(user, "get_username", None)
    name = get_username() if callable(get_username) else str(user)
    return (name or "")[:100]


def _lock_ingredient(ingredient_id) -> Ingredient:
    try:
        return Ingredient.objects.select_for_update().get(
            pk=ingredient_id, is_active=True
        )
    except (Ingredient.DoesNotExist, ValidationError, ValueError) as exc:
        # ValidationError/ValueError: malformed UUID
        raise IngredientNotFoundError(
            "Ingredient not found", ingredient_id=ingredient_id
        ) from exc


def _check_piece_quantity(ingredient: Ingredient, qty: Decimal, *, field: str = "quantity"):
    if ingredient.is_piece_unit and qty % 1 != 0:
        raise InvalidQuantityError(
            f"{field} must be a whole number for {ingredient.unit}",
            field=field,
            value=qty,
        )


def _within_range(qs, date_from=None, date_to=None):
    if date_from is not None:
        if isinstance(date_from, datetime):
            qs = qs.filter(created_at__gte=date_from)
        elif isinstance(date_from, date):
            qs = qs.filter(created_at__date__gte=date_from)
    if date_to is not None:
        if isinstance(date_to, datetime):
            qs = qs.filter(created_at__lte=date_to)
        elif isinstance(date_to, date):
            qs = qs.filter(created_at__date__lte=date_to)
    return qs


# -----------------------------
# Core write path
# -----------------------------
def append_movement(
    *,
    ingredient_id,
    movement_type,
    quantity,
    unit_cost=None,
    direction=None,
    allow_negative: bool = False,
    reason: str = "",
    notes: str = "",
    user=None,
) -> StockMovement:
    """
    Append one movement and update the ingredient projection atomically.

    Returns the persisted StockMovement.
    """
    movement_type = _to_movement_type(movement_type)
    qty = _to_quantity(quantity)
    direction = _resolve_direction(movement_type, direction)

    if allow_negative and not (
        movement_type == MovementType.ADJUSTMENT and direction == Direction.OUT
    ):
        raise StockValidationError(
            "allow_negative is only valid for ADJUSTMENT/OUT movements",
            field="allow_negative",
        )

    try:
        return _append_movement_atomic(
            ingredient_id=ingredient_id,
            movement_type=movement_type,
            direction=direction,
            qty=qty,
            unit_cost=unit_cost,
            allow_negative=allow_negative,
            reason=reason or "",
            notes=notes or "",
            created_by=_actor(user),
        )
    except DatabaseError as exc:
        logger.exception(
            "Stock movement rolled back on database error",
            extra={"ingredient_id": str(ingredient_id), "movement_type": movement_type},
        )
        raise PersistenceFailure(
            "Could not record stock movement", ingredient_id=ingredient_id
        ) from exc


@transaction.atomic
def _append_movement_atomic(
    *,
    ingredient_id,
    movement_type: str,
    direction: str,
    qty: Decimal,
    unit_cost,
    allow_negative: bool,
    reason: str,
    notes: str,
    created_by: str,
) -> StockMovement:
    ingredient = _lock_ingredient(ingredient_id)
    _check_piece_quantity(ingredient, qty)

    now = timezone.now()
    decision = decide_cost(
        ingredient=ingredient, movement_type=movement_type, unit_cost=unit_cost, at=now
    )

    before = Decimal(ingredient.quantity or 0)
    delta = qty if direction == Direction.IN else -qty
    after = before + delta
    if abs(after) > QTY_MAX:
        raise InvalidQuantityError(
            f"Resulting quantity for {ingredient.name} cannot exceed {QTY_MAX}",
            field="quantity",
            ingredient_id=ingredient.pk,
            available=before,
            requested=qty,
        )

    negative_override = False
    if after < 0:
        if not allow_negative:
            logger.warning(
                "Rejected stock movement below zero",
                extra={
                    "ingredient_id": str(ingredient.pk),
                    "available": str(before),
                    "requested": str(qty),
                    "movement_type": movement_type,
                },
            )
            raise InsufficientStockError(
                f"Insufficient stock for {ingredient.name}",
                ingredient_id=ingredient.pk,
                available=before,
                requested=qty,
            )
        negative_override = True

    qs = Ingredient.objects.filter(pk=ingredient.pk)
    if direction == Direction.OUT and not negative_override:
        qs = qs.filter(quantity__gte=qty)

    updated = qs.update(
        quantity=F("quantity") + delta,
        updated_at=now,
        **decision.ingredient_fields,
    )
    if updated != 1:
        raise InsufficientStockError(
            f"Insufficient stock for {ingredient.name}",
            ingredient_id=ingredient.pk,
            available=before,
            requested=qty,
        )

    try:
        movement = StockMovement.objects.create(
            ingredient=ingredient,
            movement_type=movement_type,
            direction=direction,
            quantity=qty,
            unit_cost_at_time=decision.unit_cost_at_time,
            negative_override=negative_override,
            reason=reason[:200],
            notes=notes[:500],
            created_by=created_by,
            created_at=now,
        )
    except ValidationError as exc:
        raise StockValidationError(str(exc)) from exc

    logger.info(
        "Stock movement recorded",
        extra={
            "movement_id": str(movement.pk),
            "ingredient_id": str(ingredient.pk),
            "movement_type": movement_type,
            "direction": direction,
            "quantity": str(qty),
            "quantity_after": str(after),
            "negative_override": negative_override,
        },
    )
    return movement


# -----------------------------
# Workflow wrappers
# -----------------------------
def receive_purchase(*, ingredient_id, quantity, unit_cost, reason="Purchase", notes="", user=None):
    return append_movement(
        ingredient_id=ingredient_id,
        movement_type=MovementType.PURCHASE,
        quantity=quantity,
        unit_cost=unit_cost,
        reason=reason,
        notes=notes,
        user=user,
    )


def record_waste(*, ingredient_id, quantity, reason="Waste", notes="", user=None):
    return append_movement(
        ingredient_id=ingredient_id,
        movement_type=MovementType.WASTE,
        quantity=quantity,
        reason=reason,
        notes=notes,
        user=user,
    )


def record_return(*, ingredient_id, quantity, reason="Return", notes="", user=None):
    return append_movement(
        ingredient_id=ingredient_id,
        movement_type=MovementType.RETURN,
        quantity=quantity,
        reason=reason,
        notes=notes,
        user=user,
    )


def adjust_quantity(
    *,
    ingredient_id,
    quantity_delta,
    allow_negative: bool = False,
    reason: str | None = None,
    notes: str | None = None,
    user=None,
) -> StockMovement:
    """
    Signed delta -> ADJUSTMENT with explicit direction.

      +N -> ADJUSTMENT/IN  ("Quantity Increase")
      -N -> ADJUSTMENT/OUT ("Quantity Decrease")
    """
    if isinstance(quantity_delta, bool) or quantity_delta in (None, ""):
        raise InvalidQuantityError("quantity_delta is required", field="quantity_delta")
    try:
        delta = Decimal(str(quantity_delta))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidQuantityError(
            "quantity_delta must be a decimal number", field="quantity_delta"
        ) from exc
    if not delta.is_finite() or delta == 0:
        raise InvalidQuantityError(
            "quantity_delta must be a non-zero number", field="quantity_delta"
        )

    magnitude = _to_quantity(abs(delta), field="quantity_delta")
    direction = Direction.IN if delta > 0 else Direction.OUT

    if reason is None:
        reason = "Quantity Increase" if delta > 0 else "Quantity Decrease"

    if notes is None:
        current = (
            Ingredient.objects.filter(pk=ingredient_id)
            .values_list("quantity", flat=True)
            .first()
        )
        if current is not None:
            target = Decimal(current) + (magnitude if delta > 0 else -magnitude)
            notes = f"Adjusted from {current} to {target}"
        else:
            notes = ""

    return append_movement(
        ingredient_id=ingredient_id,
        movement_type=MovementType.ADJUSTMENT,
        quantity=magnitude,
        direction=direction,
        allow_negative=allow_negative and direction == Direction.OUT,
        reason=reason,
        notes=notes,
        user=user,
    )


# -----------------------------
# Ingredient lifecycle
# -----------------------------
def _check_expiration(expiration_date):
    if expiration_date and expiration_date < timezone.localdate():
        raise StockValidationError(
            "Expiration date cannot be in the past", field="expiration_date"
        )


def _full_clean(ingredient: Ingredient):
    try:
        ingredient.full_clean()
    except ValidationError as exc:
        raise StockValidationError(
            "Invalid ingredient",
            errors=getattr(exc, "message_dict", None) or exc.messages,
        ) from exc


def create_ingredient(
    *,
    name: str,
    unit: str,
    low_stock_threshold=0,
    supplier: str | None = None,
    expiration_date=None,
    unit_cost=None,
    opening_quantity=None,
    user=None,
) -> Ingredient:
    """
    Create an ingredient at quantity 0.

    A non-zero opening_quantity is recorded as an ADJUSTMENT/IN movement
    ("Opening balance") so the projection matches the ledger from day one.
    """
    _check_expiration(expiration_date)
    threshold = _to_quantity(low_stock_threshold, field="low_stock_threshold", allow_zero=True)
    opening = (
        _to_quantity(opening_quantity, field="opening_quantity", allow_zero=True)
        if opening_quantity not in (None, "")
        else ZERO_QTY
    )

    ingredient = Ingredient(
        name=(name or "").strip(),
        unit=(unit or "").strip(),
        supplier=(supplier or "").strip() or None,
        expiration_date=expiration_date,
        low_stock_threshold=threshold,
        unit_cost=unit_cost if unit_cost not in (None, "") else None,
        quantity=ZERO_QTY,
    )
    _full_clean(ingredient)
    _check_piece_quantity(ingredient, opening, field="opening_quantity")

    try:
        with transaction.atomic():
            ingredient.save()
            if opening > 0:
                _append_movement_atomic(
                    ingredient_id=ingredient.pk,
                    movement_type=MovementType.ADJUSTMENT,
                    direction=Direction.IN,
                    qty=opening,
                    unit_cost=None,
                    allow_negative=False,
                    reason="Opening balance",
                    notes="",
                    created_by=_actor(user),
                )
    except DatabaseError as exc:
        logger.exception("Ingredient creation rolled back", extra={"ingredient_name": ingredient.name})
        raise PersistenceFailure("Could not create ingredient") from exc

    ingredient.refresh_from_db()
    logger.info(
        "Ingredient created",
        extra={"ingredient_id": str(ingredient.pk), "opening_quantity": str(opening)},
    )
    return ingredient


EDITABLE_FIELDS = (
    "name",
    "unit",
    "supplier",
    "expiration_date",
    "low_stock_threshold",
    "is_active",
)


@transaction.atomic
def update_ingredient_details(*, ingredient_id, **changes) -> Ingredient:
    """
    Metadata-only edit. quantity and cost fields are rejected here:
    quantity moves through append_movement, costs through purchases.
    """
    forbidden = set(changes) - set(EDITABLE_FIELDS)
    if forbidden:
        raise StockValidationError(
            "Only ingredient details can be edited here",
            fields=", ".join(sorted(forbidden)),
        )

    try:
        ingredient = Ingredient.objects.select_for_update().get(pk=ingredient_id)
    except (Ingredient.DoesNotExist, ValidationError, ValueError) as exc:
        raise IngredientNotFoundError(
            "Ingredient not found", ingredient_id=ingredient_id
        ) from exc

    if "expiration_date" in changes:
        _check_expiration(changes["expiration_date"])
    if "low_stock_threshold" in changes:
        changes["low_stock_threshold"] = _to_quantity(
            changes["low_stock_threshold"], field="low_stock_threshold", allow_zero=True
        )
    if "supplier" in changes:
        changes["supplier"] = (changes["supplier"] or "").strip() or None

    for field, value in changes.items():
        setattr(ingredient, field, value)

    _full_clean(ingredient)
    # unit may have switched to pieces
    _check_piece_quantity(ingredient, Decimal(ingredient.quantity), field="quantity")

    ingredient.save(update_fields=[*changes.keys(), "updated_at"])
    return ingredient


def deactivate_ingredient(*, ingredient_id) -> Ingredient:
    """Soft delete. Movements stay; the ingredient stops accepting new ones."""
    ingredient = update_ingredient_details(ingredient_id=ingredient_id, is_active=False)
    logger.info("Ingredient deactivated", extra={"ingredient_id": str(ingredient.pk)})
    return ingredient


# -----------------------------
# Reads
# -----------------------------
def get_history(*, ingredient_id, date_from=None, date_to=None):
    qs = StockMovement.objects.filter(ingredient_id=ingredient_id).select_related("ingredient")
    return _within_range(qs, date_from, date_to).order_by("-created_at", "-id")


def get_all(*, date_from=None, date_to=None):
    qs = StockMovement.objects.select_related("ingredient")
    return _within_range(qs, date_from, date_to).order_by("-created_at", "-id")


def get_movement(*, movement_id) -> StockMovement:
    try:
        return StockMovement.objects.select_related("ingredient").get(pk=movement_id)
    except (StockMovement.DoesNotExist, ValidationError, ValueError) as exc:
        raise MovementNotFoundError(
            "Stock movement not found", movement_id=movement_id
        ) from exc


def signed_delta(movement: StockMovement) -> Decimal:
    return movement.signed_quantity


def ledger_balance(*, ingredient_id) -> Decimal:
    """Sum of signed movement deltas for one ingredient."""
    totals = StockMovement.objects.filter(ingredient_id=ingredient_id).aggregate(
        total_in=Sum("quantity", filter=Q(direction=Direction.IN)),
        total_out=Sum("quantity", filter=Q(direction=Direction.OUT)),
    )
    balance = Decimal(totals["total_in"] or 0) - Decimal(totals["total_out"] or 0)
    return balance.quantize(QTY_PLACES)


# -----------------------------
# Repair
# -----------------------------
def reconcile_projection(*, ingredient_id=None, dry_run: bool = False) -> list[ProjectionDrift]:
    """
    Re-sum the ledger and rewrite drifted Ingredient.quantity values.

    Each ingredient is repaired under its own row lock so a concurrent
    append_movement is either fully before or fully after the check.
    """
    ingredients = Ingredient.objects.all().order_by("name", "id")
    if ingredient_id is not None:
        ingredients = ingredients.filter(pk=ingredient_id)

    drifts: list[ProjectionDrift] = []

    for pk in ingredients.values_list("pk", flat=True):
        with transaction.atomic():
            ingredient = Ingredient.objects.select_for_update().get(pk=pk)
            expected = ledger_balance(ingredient_id=pk)
            recorded = Decimal(ingredient.quantity or 0).quantize(QTY_PLACES)

            if expected == recorded:
                continue

            if not dry_run:
                Ingredient.objects.filter(pk=pk).update(
                    quantity=expected, updated_at=timezone.now()
                )

            logger.warning(
                "Ingredient projection drift",
                extra={
                    "ingredient_id": str(pk),
                    "recorded": str(recorded),
                    "ledger": str(expected),
                    "repaired": not dry_run,
                },
            )
            drifts.append(
                ProjectionDrift(
                    ingredient_id=str(pk),
                    ingredient_name=ingredient.name,
                    recorded_quantity=recorded,
                    ledger_quantity=expected,
                    repaired=not dry_run,
                )
            )

    return drifts
