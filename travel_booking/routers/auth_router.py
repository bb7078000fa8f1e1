from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from .. import schemas
from ..accounts import AccountService, get_account_service
from ..exceptions import TravelBookingError
from ..uploads import UploadStorage, get_upload_storage

router = APIRouter(prefix="/api", tags=["Accounts"])


@router.post("/register")
def register(
        nama: Optional[str] = Form(None),
        email: Optional[str] = Form(None),
        password: Optional[str] = Form(None),
        foto: Optional[UploadFile] = File(None),
        accounts: AccountService = Depends(get_account_service),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    photo = uploads.save_optional(foto)
    try:
        user = accounts.register_user(nama, email, password, photo=photo)
    except TravelBookingError:
        if photo:
            uploads.discard(photo)
        raise
    return {"message": "Registration successful", "user": user}


@router.post("/login")
def login(body: schemas.LoginRequest, accounts: AccountService = Depends(get_account_service)):
    user = accounts.login(body.email, body.password)
    return {"message": "Login successful", "user": user}


@router.post("/admin-login", response_model=schemas.Message)
def admin_login(body: schemas.AdminCredentials, accounts: AccountService = Depends(get_account_service)):
    accounts.admin_login(body.username, body.password)
    return {"message": "Admin login successful"}


@router.post("/admin_register", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def admin_register(body: schemas.AdminCredentials, accounts: AccountService = Depends(get_account_service)):
    accounts.register_admin(body.username, body.password)
    return {"message": "Admin registered"}


@router.get("/profile", response_model=schemas.Profile)
def read_profile(username: Optional[str] = None, accounts: AccountService = Depends(get_account_service)):
    return accounts.get_profile(username)


@router.post("/update-profile", response_model=schemas.Message)
def update_profile(
        email: Optional[str] = Form(None),
        phone: Optional[str] = Form(None),
        alamat: Optional[str] = Form(None),
        lahir: Optional[str] = Form(None),
        gender: Optional[str] = Form(None),
        foto: Optional[UploadFile] = File(None),
        accounts: AccountService = Depends(get_account_service),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    """
    Update contact details and, optionally, the profile photo.
    """
    photo = uploads.save_optional(foto) if email else None
    accounts.update_profile(email, photo=photo, phone=phone, address=alamat, birth_date=lahir, gender=gender)
    return {"message": "Profile updated"}


@router.get("/users")
def read_users(accounts: AccountService = Depends(get_account_service)):
    return accounts.list_users()


@router.delete("/delete_user", response_model=schemas.SuccessMessage)
def delete_user(body: schemas.UserDelete, accounts: AccountService = Depends(get_account_service)):
    accounts.delete_user(body.id_user)
    return {"success": True, "message": "User deleted"}
