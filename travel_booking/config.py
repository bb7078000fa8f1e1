from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Travel Booking API"

    # Where the JSON documents live
    DATA_DIR: Path = Path("./data")
    UPLOAD_DIR: Path = Path("./public/uploads")

    # One JSON array document per collection, names kept from the old server
    BOOKINGS_FILE: str = "kelola_booking.json"
    TRANSACTIONS_FILE: str = "kelola_transaksi.json"
    USERS_FILE: str = "users.json"
    ADMINS_FILE: str = "admins.json"
    DESTINATIONS_FILE: str = "destinasi.json"
    TRIPS_FILE: str = "trips.json"
    ITINERARY_FILE: str = "itinerary.json"
    PACKAGES_FILE: str = "kelola_paket.json"

    # --- Order pricing / payment ---
    DEFAULT_UNIT_PRICE: int = 300000
    VIRTUAL_ACCOUNT: str = "80777089237889088"

    # Deleting a booking or a transaction leaves its partner alone unless set
    CASCADE_DELETES: bool = False

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    def collection_files(self) -> dict[str, str]:
        return {
            "bookings": self.BOOKINGS_FILE,
            "transactions": self.TRANSACTIONS_FILE,
            "users": self.USERS_FILE,
            "admins": self.ADMINS_FILE,
            "destinations": self.DESTINATIONS_FILE,
            "trips": self.TRIPS_FILE,
            "itinerary": self.ITINERARY_FILE,
            "packages": self.PACKAGES_FILE,
        }


settings = Settings()
