import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends

from .exceptions import Conflict, InvalidInput, NotFound
from .repositories import CatalogRepository
from .storage import JsonDocumentStore, get_store

logger = logging.getLogger("catalog_service")

PLACEHOLDER_IMAGE = "https://via.placeholder.com/60"


def _merge_form(current: dict, fields: Dict[str, Any]) -> dict:
    """Fields left blank in an edit form keep their stored value."""
    return {key: value or current.get(key) for key, value in fields.items()}


class CatalogService:
    """Destinations, trips, itinerary entries and packages shown on the site."""

    def __init__(self, store: JsonDocumentStore):
        self.destinations = CatalogRepository(store, "destinations")
        self.trips = CatalogRepository(store, "trips", key="id")
        self.itinerary = CatalogRepository(store, "itinerary", key="id")
        self.packages = CatalogRepository(store, "packages", key="id_paket")

    # --- Destinations ---

    def list_destinations(self) -> List[Any]:
        return self.destinations.raw()

    def add_destination(self, record: dict) -> dict:
        return self.destinations.add_raw(record)

    def add_destination_with_photo(self, name: Optional[str], location: Optional[str],
                                   description: Optional[str], photo: Optional[str]) -> dict:
        return self.destinations.add_raw({
            "nama": name,
            "lokasi": location,
            "deskripsi": description,
            "foto": photo or PLACEHOLDER_IMAGE,
        })

    def delete_destination(self, index: int) -> None:
        if not self.destinations.delete_at(index):
            raise InvalidInput("Invalid index")

    # --- Trips ---

    def list_trips(self) -> List[Any]:
        return self.trips.raw()

    def add_trip(self, trip_id: Optional[str], name: Optional[str], duration: Optional[str],
                 description: Optional[str], price: Optional[str], image: Optional[str]) -> dict:
        trip = {"id": trip_id, "name": name, "durasi": duration, "desc": description,
                "price": price, "gambar": image or ""}
        with self.trips.locked():
            if self.trips.get(trip_id) is not None:
                raise Conflict("Trip ID already exists")
            self.trips.add_raw(trip)
        logger.info(f"Trip {trip_id} added")
        return trip

    def update_trip(self, trip_id: str, changes: dict) -> dict:
        trip = self.trips.merge(trip_id, changes)
        if trip is None:
            raise NotFound("Trip not found")
        return trip

    def update_trip_form(self, trip_id: str, name: Optional[str], duration: Optional[str],
                         description: Optional[str], price: Optional[str], image: Optional[str]) -> dict:
        with self.trips.locked():
            current = self.trips.get(trip_id)
            if current is None:
                raise NotFound("Trip not found")
            changes = _merge_form(current.to_record(), {
                "name": name, "durasi": duration, "desc": description, "price": price, "gambar": image,
            })
            return self.trips.merge(trip_id, changes)

    def delete_trip(self, trip_id: str) -> None:
        if not self.trips.delete(trip_id):
            raise NotFound("Trip not found")
        logger.info(f"Trip {trip_id} deleted")

    # --- Itinerary ---

    def list_itinerary(self) -> List[Any]:
        return self.itinerary.raw()

    def add_itinerary(self, item_id: Optional[str], name: Optional[str], duration: Optional[str],
                      description: Optional[str], price: Optional[str], photo: Optional[str]) -> dict:
        if not item_id or not name or not duration or not price:
            raise InvalidInput("Incomplete itinerary data")
        item = {"id": item_id, "name": name, "durasi": duration, "desc": description,
                "price": price, "foto": photo or ""}
        return self.itinerary.add_raw(item)

    def update_itinerary(self, item_id: str, name: Optional[str], duration: Optional[str],
                         description: Optional[str], price: Optional[str], photo: Optional[str]) -> dict:
        with self.itinerary.locked():
            current = self.itinerary.get(item_id)
            if current is None:
                raise NotFound("Itinerary not found")
            changes = _merge_form(current.to_record(), {
                "name": name, "durasi": duration, "desc": description, "price": price, "foto": photo,
            })
            return self.itinerary.merge(item_id, changes)

    def delete_itinerary(self, item_id: str) -> None:
        if not self.itinerary.delete(item_id):
            raise NotFound("Itinerary not found")

    # --- Packages ---

    def list_packages(self) -> List[Any]:
        return self.packages.raw()

    def add_package(self, package: dict) -> dict:
        if not package.get("id_paket") or not package.get("nama_paket") or not package.get("harga"):
            raise InvalidInput("Incomplete package data")
        return self.packages.add_raw(package)


def get_catalog_service(store: JsonDocumentStore = Depends(get_store)) -> CatalogService:
    return CatalogService(store)
