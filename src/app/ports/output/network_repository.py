from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import TransitNetwork


class INetworkRepository(ABC):
    """Port for loading the reference route and its stops."""

    @abstractmethod
    def load_network(self) -> TransitNetwork:
        raise NotImplementedError
