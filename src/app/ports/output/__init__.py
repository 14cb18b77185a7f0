from .network_repository import INetworkRepository
from .walking_router import IWalkingRouter

__all__ = [
    "INetworkRepository",
    "IWalkingRouter",
]
