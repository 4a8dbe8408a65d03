"""
Clients API - base clients et statistiques d'achat
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from database.connection import get_db
from app.models import ClientRequest, ClientResponse, ClientsOverviewResponse
from app.core.errors import http_error
from services.clients import ClientService

router = APIRouter(prefix="/api/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    return ClientService(db)


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    search: Optional[str] = Query(None, description="Nom, email ou téléphone"),
    service: ClientService = Depends(get_client_service)
):
    """
    Clients du plus récent au plus ancien

    Chaque client porte ses statistiques (ventes terminées):
    total dépensé, nombre de commandes, dernière commande.
    """
    return service.list_clients(search)


@router.get("/overview", response_model=ClientsOverviewResponse)
async def clients_overview(
    search: Optional[str] = Query(None),
    service: ClientService = Depends(get_client_service)
):
    """Valeur totale des clients + top 5"""
    return service.overview(search)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: int, service: ClientService = Depends(get_client_service)):
    client = service.get_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail=f"Client not found: {client_id}")
    return client


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(request: ClientRequest, service: ClientService = Depends(get_client_service)):
    try:
        return service.create_client(request.model_dump())
    except Exception as e:
        raise http_error(e)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    request: ClientRequest,
    service: ClientService = Depends(get_client_service)
):
    try:
        client = service.update_client(client_id, request.model_dump())
    except Exception as e:
        raise http_error(e)
    if not client:
        raise HTTPException(status_code=404, detail=f"Client not found: {client_id}")
    return client


@router.delete("/{client_id}")
async def delete_client(client_id: int, service: ClientService = Depends(get_client_service)):
    try:
        deleted = service.delete_client(client_id)
    except Exception as e:
        raise http_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Client not found: {client_id}")
    return {"status": "deleted", "id": client_id}
