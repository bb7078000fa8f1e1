from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status

from .. import schemas
from ..catalog import CatalogService, get_catalog_service
from ..uploads import UploadStorage, get_upload_storage

router = APIRouter(prefix="/api", tags=["Catalog"])


# --- Destinations ---

@router.get("/destinasi")
def read_destinations(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.list_destinations()


@router.post("/destinasi", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def create_destination(
        destination: Dict[str, Any] = Body(...),
        catalog: CatalogService = Depends(get_catalog_service),
):
    catalog.add_destination(destination)
    return {"message": "Destination added"}


@router.delete("/destinasi/{index}", response_model=schemas.Message)
def delete_destination(index: int, catalog: CatalogService = Depends(get_catalog_service)):
    catalog.delete_destination(index)
    return {"message": "Destination deleted"}


@router.post("/destinasi-upload", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def upload_destination(
        nama: Optional[str] = Form(None),
        lokasi: Optional[str] = Form(None),
        deskripsi: Optional[str] = Form(None),
        foto: Optional[UploadFile] = File(None),
        catalog: CatalogService = Depends(get_catalog_service),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    catalog.add_destination_with_photo(nama, lokasi, deskripsi, uploads.save_optional(foto))
    return {"message": "Destination added"}


# --- Trips ---

@router.get("/trips")
def read_trips(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.list_trips()


@router.post("/trips", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def create_trip(
        id: Optional[str] = Form(None),
        name: Optional[str] = Form(None),
        durasi: Optional[str] = Form(None),
        desc: Optional[str] = Form(None),
        price: Optional[str] = Form(None),
        gambar: Optional[UploadFile] = File(None),
        catalog: CatalogService = Depends(get_catalog_service),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    catalog.add_trip(id, name, durasi, desc, price, uploads.save_optional(gambar))
    return {"message": "Trip added"}


@router.put("/trips/{trip_id}", response_model=schemas.Message)
def update_trip(
        trip_id: str,
        changes: Dict[str, Any] = Body(...),
        catalog: CatalogService = Depends(get_catalog_service),
):
    catalog.update_trip(trip_id, changes)
    return {"message": "Trip updated"}


@router.put("/trips-upload/{trip_id}", response_model=schemas.Message)
def update_trip_with_image(
        trip_id: str,
        name: Optional[str] = Form(None),
        durasi: Optional[str] = Form(None),
        desc: Optional[str] = Form(None),
        price: Optional[str] = Form(None),
        gambar: Optional[UploadFile] = File(None),
        catalog: CatalogService = Depends(get_catalog_service),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    catalog.update_trip_form(trip_id, name, durasi, desc, price, uploads.save_optional(gambar))
    return {"message": "Trip updated (with image)"}


@router.delete("/trips/{trip_id}", response_model=schemas.Message)
def delete_trip(trip_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    catalog.delete_trip(trip_id)
    return {"message": "Trip deleted"}


# --- Itinerary ---

@router.get("/itinerary")
def read_itinerary(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.list_itinerary()


@router.post("/itinerary-upload", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def upload_itinerary(
        id: Optional[str] = Form(None),
        name: Optional[str] = Form(None),
        durasi: Optional[str] = Form(None),
        desc: Optional[str] = Form(None),
        price: Optional[str] = Form(None),
        foto: Optional[UploadFile] = File(None),
        catalog: CatalogService = Depends(get_catalog_service),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    catalog.add_itinerary(id, name, durasi, desc, price, uploads.save_optional(foto))
    return {"message": "Itinerary added"}


@router.put("/itinerary/{item_id}", response_model=schemas.Message)
def update_itinerary(
        item_id: str,
        name: Optional[str] = Form(None),
        durasi: Optional[str] = Form(None),
        desc: Optional[str] = Form(None),
        price: Optional[str] = Form(None),
        foto: Optional[UploadFile] = File(None),
        catalog: CatalogService = Depends(get_catalog_service),
        uploads: UploadStorage = Depends(get_upload_storage),
):
    catalog.update_itinerary(item_id, name, durasi, desc, price, uploads.save_optional(foto))
    return {"message": "Itinerary updated"}


@router.delete("/itinerary/{item_id}", response_model=schemas.Message)
def delete_itinerary(item_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    catalog.delete_itinerary(item_id)
    return {"message": "Itinerary deleted"}


# --- Packages ---

@router.get("/paket")
def read_packages(catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.list_packages()


@router.post("/paket", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def create_package(
        package: Dict[str, Any] = Body(...),
        catalog: CatalogService = Depends(get_catalog_service),
):
    catalog.add_package(package)
    return {"message": "Package added"}
