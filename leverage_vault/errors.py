from __future__ import annotations


class LeverageVaultError(RuntimeError):
    """Base class for failures raised while refreshing leverage vault pools."""


class NotInitializedError(LeverageVaultError):
    """Raised when refresh state is read before initialization completed."""


class MissingPriceError(LeverageVaultError, KeyError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"No USD price for token {address}")

    def __str__(self) -> str:
        return self.args[0]


class SubgraphError(LeverageVaultError):
    pass


class RpcError(LeverageVaultError):
    pass
