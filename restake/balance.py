from decimal import Decimal

from attrs import frozen

COSMOS_DECIMALS = 6
ETH_DECIMALS = 18


def is_eth_chain(chain: str | None, eth_chains: list[str]) -> bool:
    if not chain:
        return False
    name = chain.lower()
    return any(e.lower() == name or e.lower() in name for e in eth_chains if e)


def display_token(denom: str) -> str:
    # drop the unit prefix: uphoton -> PHOTON, adym -> DYM
    return denom[1:].upper()


@frozen
class Balance:
    amount: int
    denom: str
    decimals: int = COSMOS_DECIMALS

    @property
    def value(self) -> Decimal:
        return Decimal(self.amount).scaleb(-self.decimals)

    @property
    def token(self) -> str:
        return display_token(self.denom)

    def is_below(self, threshold: int) -> bool:
        return int(self.value) < threshold

    def __str__(self) -> str:
        value = self.value.normalize()
        if value == 0:
            value = Decimal(0)
        return f"{value:f} {self.token}"
