import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Tuple

from fastapi import Depends

from . import models
from .config import settings
from .exceptions import InvalidInput, NotFound
from .identifiers import IdGenerator, id_generator
from .repositories import BookingRepository, TransactionRepository
from .storage import JsonDocumentStore, get_store
from .utils import format_rupiah, parse_int

logger = logging.getLogger("booking_service")


class PropagationResult(str, Enum):
    """How far a verification-status change travelled."""
    FULLY_PROPAGATED = "fully_propagated"
    # The linked booking no longer exists; only the transaction changed
    TRANSACTION_ONLY = "transaction_only"


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def booking_status_for(verification_status: str) -> str:
    """Maps a transaction's verification status onto its booking's status."""
    if verification_status == models.VERIFICATION_COMPLETED:
        return models.BOOKING_ACCEPTED
    return verification_status


def normalize_party_size(value: Any) -> int:
    size = parse_int(value)
    if not size or size < 1:
        return 1
    return size


def normalize_total(total: Any, party_size: int, unit_price: Any, default_unit_price: int) -> int:
    price = parse_int(unit_price)
    if not price or price < 0:
        price = default_unit_price
    amount = parse_int(total)
    if amount and amount > 0:
        return amount
    return party_size * price


class BookingOrchestrator:
    """
    Keeps bookings and their payment transactions consistent.

    A purchase creates one booking and one transaction sharing an id timestamp.
    Verification changes are written to the transaction first and then copied
    to the booking it points at.
    """

    def __init__(
            self,
            bookings: BookingRepository,
            transactions: TransactionRepository,
            ids: Optional[IdGenerator] = None,
            default_unit_price: int = settings.DEFAULT_UNIT_PRICE,
            virtual_account: str = settings.VIRTUAL_ACCOUNT,
            cascade_deletes: bool = settings.CASCADE_DELETES,
    ):
        self.bookings = bookings
        self.transactions = transactions
        self.ids = ids or id_generator
        self.default_unit_price = default_unit_price
        self.virtual_account = virtual_account
        self.cascade_deletes = cascade_deletes

    def place_order(
            self,
            username: Optional[str],
            package_name: Optional[str],
            payment_method: Optional[str],
            booking_date: Optional[str] = None,
            party_size: Any = None,
            total_amount: Any = None,
            unit_price: Any = None,
    ) -> Tuple[models.Booking, models.Transaction]:
        """
        Creates a booking and its transaction.

        The two collections are written one after the other, each under its
        own lock. A crash between the writes leaves a booking without a
        transaction.
        """
        size = normalize_party_size(party_size)
        total = normalize_total(total_amount, size, unit_price, self.default_unit_price)

        # 1. One timestamp for both ids
        id_booking, id_transaksi = self.ids.next_pair()
        now = iso_now()

        # 2. Build both records
        booking = models.Booking(
            id_booking=id_booking,
            username=username,
            package_name=package_name,
            booking_date=booking_date or now,
            party_size=size,
            total_amount=total,
            status=models.BOOKING_AWAITING_PAYMENT,
        )
        transaction = models.Transaction(
            id_transaksi=id_transaksi,
            id_booking=id_booking,
            sender_name=username,
            package_name=package_name,
            payment_method=payment_method,
            amount_transferred=total,
            proof_reference=None,
            transfer_timestamp=now,
            verification_status=models.AWAITING_VERIFICATION,
        )

        # 3. Persist, booking first
        self.bookings.add(booking)
        self.transactions.add(transaction)

        logger.info(f"Order placed: booking {id_booking}, transaction {id_transaksi}, total {total}")
        return booking, transaction

    def update_verification_status(self, id_transaksi: Optional[str], new_status: Optional[str]) -> PropagationResult:
        if not id_transaksi or new_status is None or not str(new_status).strip():
            raise InvalidInput("id_transaksi and status_verifikasi are required")

        def set_status(t: models.Transaction):
            t.verification_status = new_status

        transaction = self.transactions.update(id_transaksi, set_status)
        if transaction is None:
            raise NotFound("Transaction not found")

        booking_status = booking_status_for(new_status)

        def set_booking_status(b: models.Booking):
            b.status = booking_status

        booking = None
        if transaction.id_booking:
            booking = self.bookings.update(transaction.id_booking, set_booking_status)

        if booking is None:
            logger.warning(
                f"Transaction {id_transaksi} set to '{new_status}' but booking "
                f"{transaction.id_booking} was not found; booking left unchanged"
            )
            return PropagationResult.TRANSACTION_ONLY

        logger.info(f"Transaction {id_transaksi} set to '{new_status}', booking {booking.id_booking} -> '{booking_status}'")
        return PropagationResult.FULLY_PROPAGATED

    def require_transaction(self, id_transaksi: str) -> models.Transaction:
        transaction = self.transactions.get(id_transaksi)
        if transaction is None:
            raise NotFound("Transaction not found")
        return transaction

    def attach_proof(self, id_transaksi: str, file_reference: str, sender_name: Optional[str] = None) -> models.Transaction:
        """
        Records an uploaded proof of payment. Verification always starts over,
        whatever the previous status was.
        """

        def apply(t: models.Transaction):
            if sender_name:
                t.sender_name = sender_name
            t.proof_reference = file_reference
            t.verification_status = models.AWAITING_VERIFICATION

        transaction = self.transactions.update(id_transaksi, apply)
        if transaction is None:
            raise NotFound("Transaction not found")

        logger.info(f"Proof {file_reference} attached to transaction {id_transaksi}")
        return transaction

    def delete_transaction(self, id_transaksi: str) -> None:
        transaction = self.transactions.get(id_transaksi) if self.cascade_deletes else None

        if not self.transactions.delete(id_transaksi):
            raise NotFound("Transaction not found")
        logger.info(f"Transaction {id_transaksi} deleted")

        if transaction is not None and transaction.id_booking:
            if self.bookings.delete(transaction.id_booking):
                logger.info(f"Cascade: booking {transaction.id_booking} deleted")

    def delete_booking(self, id_booking: str) -> None:
        if not self.bookings.delete(id_booking):
            raise NotFound("Booking not found", success=False)
        logger.info(f"Booking {id_booking} deleted")

        if self.cascade_deletes:
            removed = self.transactions.delete_for_booking(id_booking)
            if removed:
                logger.info(f"Cascade: {removed} transaction(s) of booking {id_booking} deleted")

    def latest_transaction_summary(self) -> dict:
        """Payment instructions for the most recently stored transaction."""
        last = self.transactions.last_raw()
        if last is None:
            raise NotFound("No transactions")

        # Read the stored entry directly, a legacy shape still gets a summary
        if not isinstance(last, dict):
            last = {}
        return {
            "id_transaksi": last.get("id_transaksi"),
            "virtual_account": self.virtual_account,
            "total_tagihan": format_rupiah(last.get("jumlah_transfer")),
        }

    def list_bookings(self) -> List[dict]:
        return self.bookings.raw()

    def list_transactions(self) -> List[dict]:
        return self.transactions.raw()


def get_orchestrator(store: JsonDocumentStore = Depends(get_store)) -> BookingOrchestrator:
    return BookingOrchestrator(
        BookingRepository(store),
        TransactionRepository(store),
        default_unit_price=settings.DEFAULT_UNIT_PRICE,
        virtual_account=settings.VIRTUAL_ACCOUNT,
        cascade_deletes=settings.CASCADE_DELETES,
    )
