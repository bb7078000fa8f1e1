# Import testing tools
import io

from fastapi.testclient import TestClient

from travel_booking import models
from travel_booking.config import settings
from travel_booking.exceptions import NotFound
from travel_booking.orchestrator import BookingOrchestrator


# --- Helper function to place an order through the API ---
def place_order(client: TestClient, **overrides) -> dict:
    order = {
        "username": "ayu@example.com",
        "nama_paket": "Bromo Sunrise",
        "metode_pembayaran": "Transfer BCA",
    }
    order.update(overrides)
    response = client.post("/api/pemesanan", json=order)
    assert response.status_code == 200
    return response.json()


# --- Test Cases ---

def test_place_order_success(client: TestClient):
    """Test placing an order returns the linked pair."""
    data = place_order(client, jumlah_orang="2", harga_per_orang="450000")

    # --- Assertions for the API Response ---
    assert data["message"] == "Transaction saved"
    booking, transaksi = data["booking"], data["transaksi"]
    assert booking["id_booking"].startswith("BK")
    assert transaksi["id_transaksi"].startswith("TRX")
    assert transaksi["id_booking"] == booking["id_booking"]
    assert booking["jumlah_orang"] == 2
    assert booking["harga_total"] == 900000
    assert transaksi["jumlah_transfer"] == booking["harga_total"]
    assert booking["status"] == models.BOOKING_AWAITING_PAYMENT
    assert transaksi["status_verifikasi"] == models.AWAITING_VERIFICATION
    assert transaksi["bukti_transfer"] is None
    assert transaksi["nama_pengirim"] == "ayu@example.com"


def test_place_order_defaults(client: TestClient):
    """No party size, unit price or total: 1 person, 300000."""
    booking = place_order(client)["booking"]
    assert booking["jumlah_orang"] == 1
    assert booking["harga_total"] == 300000


def test_place_order_with_total(client: TestClient):
    booking = place_order(client, jumlah_orang=4, total_tagihan=1000000)["booking"]
    assert booking["harga_total"] == 1000000


def test_place_order_listed(client: TestClient):
    data = place_order(client)

    bookings = client.get("/api/bookings").json()
    transactions = client.get("/api/transaksi").json()

    assert bookings == [data["booking"]]
    assert transactions == [data["transaksi"]]


def test_lists_empty_on_fresh_store(client: TestClient):
    assert client.get("/api/bookings").json() == []
    assert client.get("/api/transaksi").json() == []


def test_lists_empty_on_corrupt_document(client: TestClient, store):
    """A broken document reads as an empty collection instead of an error."""
    path = store.path_for("bookings")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("{{{", encoding="utf-8")

    response = client.get("/api/bookings")
    assert response.status_code == 200
    assert response.json() == []


# --- Verification status ---

def test_update_status_completed(client: TestClient):
    data = place_order(client)
    id_transaksi = data["transaksi"]["id_transaksi"]

    response = client.post("/api/update_transaksi_status",
                           json={"id_transaksi": id_transaksi, "status_verifikasi": "Selesai"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Transaction and booking status updated"}
    assert client.get("/api/bookings").json()[0]["status"] == "Diterima"
    assert client.get("/api/transaksi").json()[0]["status_verifikasi"] == "Selesai"


def test_update_status_copied_verbatim(client: TestClient):
    data = place_order(client)
    client.post("/api/update_transaksi_status",
                json={"id_transaksi": data["transaksi"]["id_transaksi"], "status_verifikasi": "Ditolak"})
    assert client.get("/api/bookings").json()[0]["status"] == "Ditolak"


def test_update_status_unknown_transaction(client: TestClient):
    response = client.post("/api/update_transaksi_status",
                           json={"id_transaksi": "TRX0", "status_verifikasi": "Selesai"})
    assert response.status_code == 404
    assert response.json() == {"message": "Transaction not found"}


def test_update_status_missing_fields(client: TestClient):
    response = client.post("/api/update_transaksi_status", json={"id_transaksi": "TRX0"})
    assert response.status_code == 400
    assert "message" in response.json()


def test_update_status_same_response_without_booking(client: TestClient):
    """The response does not reveal whether the booking side was reached."""
    data = place_order(client)
    client.request("DELETE", "/api/delete_booking", json={"id_booking": data["booking"]["id_booking"]})

    response = client.post("/api/update_transaksi_status",
                           json={"id_transaksi": data["transaksi"]["id_transaksi"], "status_verifikasi": "Selesai"})

    assert response.status_code == 200
    assert response.json()["success"] is True


# --- Proof of payment ---

def test_upload_proof(client: TestClient, upload_storage):
    data = place_order(client)
    id_transaksi = data["transaksi"]["id_transaksi"]
    client.post("/api/update_transaksi_status", json={"id_transaksi": id_transaksi, "status_verifikasi": "Selesai"})

    response = client.post(
        f"/api/upload-bukti/{id_transaksi}",
        files={"bukti": ("transfer.jpg", io.BytesIO(b"jpeg-bytes"), "image/jpeg")},
        data={"nama_pengirim": "Ayu Lestari"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["file"].endswith(".jpg")
    assert (upload_storage.upload_dir / body["file"]).read_bytes() == b"jpeg-bytes"

    transaksi = client.get("/api/transaksi").json()[0]
    assert transaksi["bukti_transfer"] == f"/uploads/{body['file']}"
    assert transaksi["nama_pengirim"] == "Ayu Lestari"
    assert transaksi["status_verifikasi"] == models.AWAITING_VERIFICATION


def test_upload_proof_unknown_transaction_stores_nothing(client: TestClient, upload_storage):
    response = client.post(
        "/api/upload-bukti/TRX404",
        files={"bukti": ("transfer.jpg", io.BytesIO(b"x"), "image/jpeg")},
    )
    assert response.status_code == 404
    assert not upload_storage.upload_dir.exists() or not any(upload_storage.upload_dir.iterdir())


def test_upload_proof_removes_file_when_transaction_vanishes(client: TestClient, upload_storage, mocker):
    """The transaction is deleted between the existence check and the write."""
    id_transaksi = place_order(client)["transaksi"]["id_transaksi"]
    mocker.patch.object(BookingOrchestrator, "attach_proof", side_effect=NotFound("Transaction not found"))

    response = client.post(
        f"/api/upload-bukti/{id_transaksi}",
        files={"bukti": ("transfer.jpg", io.BytesIO(b"x"), "image/jpeg")},
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Transaction not found"}
    assert list(upload_storage.upload_dir.iterdir()) == []


def test_upload_proof_requires_file(client: TestClient):
    id_transaksi = place_order(client)["transaksi"]["id_transaksi"]
    response = client.post(f"/api/upload-bukti/{id_transaksi}", data={"nama_pengirim": "Ayu"})
    assert response.status_code == 400


# --- Deletes ---

def test_delete_booking_keeps_transaction(client: TestClient):
    data = place_order(client)

    response = client.request("DELETE", "/api/delete_booking", json={"id_booking": data["booking"]["id_booking"]})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Booking deleted"}
    assert client.get("/api/bookings").json() == []
    assert len(client.get("/api/transaksi").json()) == 1


def test_delete_booking_not_found(client: TestClient):
    response = client.request("DELETE", "/api/delete_booking", json={"id_booking": "BK404"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Booking not found"}


def test_delete_transaction_keeps_booking(client: TestClient):
    data = place_order(client)

    response = client.delete(f"/api/hapus_transaksi/{data['transaksi']['id_transaksi']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Transaction deleted"}
    assert client.get("/api/transaksi").json() == []
    assert len(client.get("/api/bookings").json()) == 1


def test_delete_transaction_not_found(client: TestClient):
    response = client.delete("/api/hapus_transaksi/TRX404")
    assert response.status_code == 404
    assert response.json() == {"message": "Transaction not found"}


def test_cascade_setting(client: TestClient, monkeypatch):
    monkeypatch.setattr(settings, "CASCADE_DELETES", True)
    data = place_order(client)

    client.request("DELETE", "/api/delete_booking", json={"id_booking": data["booking"]["id_booking"]})

    assert client.get("/api/transaksi").json() == []


# --- Latest transaction ---

def test_latest_transaction_empty(client: TestClient):
    response = client.get("/api/transaksi/latest")
    assert response.status_code == 404
    assert response.json() == {"message": "No transactions"}


def test_latest_transaction(client: TestClient):
    place_order(client)
    last = place_order(client, jumlah_orang=5)["transaksi"]

    response = client.get("/api/transaksi/latest")

    assert response.status_code == 200
    assert response.json() == {
        "id_transaksi": last["id_transaksi"],
        "virtual_account": "80777089237889088",
        "total_tagihan": "Rp 1.500.000",
    }


def test_latest_transaction_with_malformed_last_entry(client: TestClient, store):
    store.save("transactions", [{"id_transaksi": 123, "jumlah_transfer": 100}])

    response = client.get("/api/transaksi/latest")

    assert response.status_code == 200
    assert response.json()["id_transaksi"] == 123
    assert response.json()["total_tagihan"] == "Rp 100"


def test_root_and_health(client: TestClient):
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "healthy"}
