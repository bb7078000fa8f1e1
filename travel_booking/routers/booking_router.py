from fastapi import APIRouter, Depends

from .. import schemas
from ..orchestrator import BookingOrchestrator, get_orchestrator

router = APIRouter(prefix="/api", tags=["Bookings"])


@router.post("/pemesanan", response_model=schemas.OrderPlaced)
def place_order(
        order: schemas.OrderCreate,
        orchestrator: BookingOrchestrator = Depends(get_orchestrator),
):
    """
    Create a booking together with the transaction that will carry its payment.
    """
    booking, transaction = orchestrator.place_order(
        username=order.username,
        package_name=order.nama_paket,
        payment_method=order.metode_pembayaran,
        booking_date=order.tanggal_pemesanan,
        party_size=order.jumlah_orang,
        total_amount=order.total_tagihan,
        unit_price=order.harga_per_orang,
    )
    return {"message": "Transaction saved", "booking": booking, "transaksi": transaction}


@router.get("/bookings")
def read_bookings(orchestrator: BookingOrchestrator = Depends(get_orchestrator)):
    return orchestrator.list_bookings()


@router.delete("/delete_booking", response_model=schemas.SuccessMessage)
def delete_booking(
        body: schemas.BookingDelete,
        orchestrator: BookingOrchestrator = Depends(get_orchestrator),
):
    """
    Remove a booking. Its transaction is kept unless cascading deletes are enabled.
    """
    orchestrator.delete_booking(body.id_booking)
    return {"success": True, "message": "Booking deleted"}
