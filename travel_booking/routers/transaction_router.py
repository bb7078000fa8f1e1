from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from .. import schemas
from ..exceptions import InvalidInput, NotFound
from ..orchestrator import BookingOrchestrator, get_orchestrator
from ..uploads import UploadStorage, get_upload_storage, reference_for

router = APIRouter(prefix="/api", tags=["Transactions"])


@router.post("/upload-bukti/{id_transaksi}", response_model=schemas.UploadResult)
def upload_payment_proof(
        id_transaksi: str,
        bukti: Optional[UploadFile] = File(None),
        nama_pengirim: Optional[str] = Form(None),
        orchestrator: BookingOrchestrator = Depends(get_orchestrator),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    """
    Attach a proof of payment and send the transaction back to verification.
    """
    # Check first so an unknown transaction leaves no stray file behind
    orchestrator.require_transaction(id_transaksi)
    if bukti is None or not bukti.filename:
        raise InvalidInput("Proof of payment file 'bukti' is required")

    filename = uploads.save(bukti)
    try:
        orchestrator.attach_proof(id_transaksi, reference_for(filename), sender_name=nama_pengirim)
    except NotFound:
        # Deleted between the check and the write
        uploads.discard(filename)
        raise
    return {"success": True, "file": filename}


@router.post("/update_transaksi_status", response_model=schemas.SuccessMessage)
def update_transaction_status(
        body: schemas.TransactionStatusUpdate,
        orchestrator: BookingOrchestrator = Depends(get_orchestrator),
):
    """
    Set a transaction's verification status and copy it to the linked booking.
    """
    orchestrator.update_verification_status(body.id_transaksi, body.status_verifikasi)
    return {"success": True, "message": "Transaction and booking status updated"}


@router.get("/transaksi")
def read_transactions(orchestrator: BookingOrchestrator = Depends(get_orchestrator)):
    return orchestrator.list_transactions()


@router.get("/transaksi/latest", response_model=schemas.LatestTransaction)
def read_latest_transaction(orchestrator: BookingOrchestrator = Depends(get_orchestrator)):
    return orchestrator.latest_transaction_summary()


@router.delete("/hapus_transaksi/{id_transaksi}", response_model=schemas.Message)
def delete_transaction(
        id_transaksi: str,
        orchestrator: BookingOrchestrator = Depends(get_orchestrator),
):
    orchestrator.delete_transaction(id_transaksi)
    return {"message": "Transaction deleted"}
