from __future__ import annotations

from fastapi import APIRouter, Depends

from src.adapters.api.controllers.routes import _point_to_schema, _stop_to_schema
from src.adapters.api.dependencies import get_network_repository
from src.adapters.api.schemas.routes import NetworkSchema
from src.app.ports.output import INetworkRepository

router = APIRouter(tags=["network"])


@router.get("/network", response_model=NetworkSchema)
def get_network(
    repository: INetworkRepository = Depends(get_network_repository),
) -> NetworkSchema:
    network = repository.load_network()
    return NetworkSchema(
        stops=[_stop_to_schema(s) for s in network.stops],
        route=[_point_to_schema(p) for p in network.route],
    )
