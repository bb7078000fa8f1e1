from typing import Any, Optional, Union

from pydantic import BaseModel

from .models import Booking, Transaction

# Older frontends send numbers as strings ("2", "300000")
Number = Union[int, float, str]


class OrderCreate(BaseModel):
    username: Optional[str] = None
    nama_paket: Optional[str] = None
    tanggal_pemesanan: Optional[str] = None
    jumlah_orang: Optional[Number] = None
    total_tagihan: Optional[Number] = None
    metode_pembayaran: Optional[str] = None
    # When sent, the total is computed from it
    harga_per_orang: Optional[Number] = None


class OrderPlaced(BaseModel):
    message: str
    booking: Booking
    transaksi: Transaction


class TransactionStatusUpdate(BaseModel):
    id_transaksi: Optional[str] = None
    status_verifikasi: Optional[str] = None


class BookingDelete(BaseModel):
    id_booking: Optional[str] = None


class LatestTransaction(BaseModel):
    # Echoed as stored, legacy entries may hold a number or nothing
    id_transaksi: Any = None
    virtual_account: str
    total_tagihan: str


class Message(BaseModel):
    message: str


class SuccessMessage(BaseModel):
    success: bool = True
    message: str


class UploadResult(BaseModel):
    success: bool = True
    file: str


# --- Accounts ---

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AdminCredentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserDelete(BaseModel):
    id_user: Optional[str] = None


class Profile(BaseModel):
    username: Optional[str] = None
    nama: Optional[str] = None
    photo: str = ""
    phone: str = ""
    alamat: str = ""
    lahir: str = ""
    gender: str = ""
