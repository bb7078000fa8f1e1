from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .utils import parse_int

# --- Status labels ---
BOOKING_AWAITING_PAYMENT = "Awaiting Payment"
AWAITING_VERIFICATION = "Awaiting Verification"

# An admin marking a transaction "Selesai" (completed) accepts the booking.
VERIFICATION_COMPLETED = "Selesai"
BOOKING_ACCEPTED = "Diterima"

# Stored numbers may have been written as strings by older clients
LenientInt = Annotated[Optional[int], BeforeValidator(parse_int)]


class Record(BaseModel):
    """
    A record of a JSON collection.

    Attributes use English names, the aliases are the keys stored on disk and
    sent to the frontend. Unknown keys are carried through untouched.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


class Booking(Record):
    id_booking: str

    # Weak reference, not checked against the user store
    username: Optional[str] = None

    package_name: Optional[str] = Field(default=None, alias="nama_paket")
    booking_date: Optional[str] = Field(default=None, alias="tanggal_pemesanan")
    party_size: LenientInt = Field(default=1, alias="jumlah_orang")
    total_amount: LenientInt = Field(default=0, alias="harga_total")
    status: Optional[str] = BOOKING_AWAITING_PAYMENT


class Transaction(Record):
    id_transaksi: str

    # Set once at creation, never revalidated
    id_booking: Optional[str] = None

    sender_name: Optional[str] = Field(default=None, alias="nama_pengirim")

    # Snapshot of the booking's package name, not kept in sync
    package_name: Optional[str] = Field(default=None, alias="nama_paket")

    payment_method: Optional[str] = Field(default=None, alias="metode_pembayaran")
    amount_transferred: LenientInt = Field(default=0, alias="jumlah_transfer")
    proof_reference: Optional[str] = Field(default=None, alias="bukti_transfer")
    transfer_timestamp: Optional[str] = Field(default=None, alias="tanggal_transfer")
    verification_status: Optional[str] = Field(default=AWAITING_VERIFICATION, alias="status_verifikasi")


class User(Record):
    id_user: Optional[str] = None
    name: Optional[str] = Field(default=None, alias="nama")
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    photo: Optional[str] = Field(default="", alias="foto")
    phone: Optional[str] = None
    address: Optional[str] = Field(default=None, alias="alamat")
    birth_date: Optional[str] = Field(default=None, alias="lahir")
    gender: Optional[str] = None


class Admin(Record):
    username: str
    password: str
