"""In-memory stand-ins for the chain session and artifact loader."""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from Blockchain.artifacts import ContractArtifact
from Blockchain.errors import ArtifactLoadError, TransactionReverted

DAI_SUPPLY = 1_000_000_000

ABIS: Dict[str, list] = {
    "DYBToken": [
        {
            "type": "constructor",
            "inputs": [
                {"name": "_name", "type": "string"},
                {"name": "_symbol", "type": "string"},
                {"name": "_decimals", "type": "uint8"},
            ],
        }
    ],
    "DaiToken": [],
    "DonationCenter": [
        {
            "type": "constructor",
            "inputs": [
                {"name": "_dai", "type": "address"},
                {"name": "_dyb", "type": "address"},
            ],
        }
    ],
}


def make_artifact(name: str) -> ContractArtifact:
    return ContractArtifact(
        name=name,
        abi=ABIS[name],
        bytecode="0x6080",
        sourceText=f"contract {name} {{}}",
        compiler={"longVersion": "v0.8.30+commit.73712a01", "optimizer": {"enabled": True, "runs": 200}},
    )


class FakeLoader:
    def __init__(self, missing=()):
        self.missing = set(missing)
        self.loaded: List[str] = []

    def load(self, name: str) -> ContractArtifact:
        if name in self.missing or name not in ABIS:
            raise ArtifactLoadError(f"No artifact for {name}")
        self.loaded.append(name)
        return make_artifact(name)


class FakeToken:
    def __init__(self, session: "FakeSession", deployer: str, args: list, supply: int = 0) -> None:
        self.session = session
        self.owner = deployer
        self.args = args
        self.balances: Dict[str, int] = {deployer: supply} if supply else {}
        self.allowances: Dict[Tuple[str, str], int] = {}
        self.logic: set = set()

    def balanceOf(self, who: str) -> int:
        return self.balances.get(who, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((owner, spender), 0)

    def _move(self, src: str, dst: str, amount: int) -> None:
        if self.balanceOf(src) < amount:
            raise TransactionReverted("0xbalance")
        self.balances[src] = self.balanceOf(src) - amount
        self.balances[dst] = self.balanceOf(dst) + amount

    def transfer(self, sender: str, to: str, amount: int) -> None:
        self._move(sender, to, amount)

    def approve(self, sender: str, spender: str, amount: int) -> None:
        self.allowances[(sender, spender)] = amount

    def transferFrom(self, sender: str, src: str, dst: str, amount: int) -> None:
        if self.allowance(src, sender) < amount:
            raise TransactionReverted("0xallowance")
        self.allowances[(src, sender)] -= amount
        self._move(src, dst, amount)

    def addLogic(self, sender: str, logic: str) -> None:
        if sender != self.owner:
            raise TransactionReverted("0xowner")
        self.logic.add(logic)

    def mint(self, sender: str, to: str, amount: int) -> None:
        if sender not in self.logic:
            raise TransactionReverted("0xlogic")
        self.balances[to] = self.balanceOf(to) + amount


class FakeDonationCenter:
    def __init__(self, session: "FakeSession", deployer: str, args: list) -> None:
        self.session = session
        self.address = ""
        self.dai, self.dyb = args
        self.donations: Dict[str, int] = {}
        self.total = 0

    def donationsOf(self, who: str) -> int:
        return self.donations.get(who, 0)

    def totalDonations(self) -> int:
        return self.total

    def donate(self, sender: str, amount: int) -> None:
        self.session.contracts[self.dai].transferFrom(self.address, sender, self.address, amount)
        self.session.contracts[self.dyb].mint(self.address, sender, amount)
        self.donations[sender] = self.donationsOf(sender) + amount
        self.total += amount


class FakeSession:
    """Chain session double; records every submission and can fail one of them."""

    def __init__(self, n_accounts: int = 6) -> None:
        self._accounts = [f"0x{i + 1:040x}" for i in range(n_accounts)]
        self.contracts: Dict[str, Any] = {}
        self.ether: Dict[str, int] = {}
        self.log: List[Tuple[str, str, tuple]] = []
        self.fail_on: set = set()
        self.closed = False

    async def accounts(self) -> List[str]:
        return self._accounts

    def _check(self, method: str, sender: str) -> None:
        if (method, sender) in self.fail_on:
            raise TransactionReverted(f"0x{method}")

    async def deploy(self, artifact: ContractArtifact, args: list, sender: str):
        self._check("deploy:" + artifact.name, sender)
        self.log.append(("deploy:" + artifact.name, sender, tuple(args)))
        address = f"0x{0x1000 + len(self.contracts):040x}"
        if artifact.name == "DonationCenter":
            contract = FakeDonationCenter(self, sender, args)
            contract.address = address
        elif artifact.name == "DaiToken":
            contract = FakeToken(self, sender, args, supply=DAI_SUPPLY)
        else:
            contract = FakeToken(self, sender, args)
        self.contracts[address] = contract
        return address, contract

    async def transact(self, handle: Any, method: str, args: list, sender: str) -> Dict[str, int]:
        self._check(method, sender)
        self.log.append((method, sender, tuple(args)))
        getattr(handle, method)(sender, *args)
        return {"status": 1, "gasUsed": 21_000}

    async def send_value(self, sender: str, to: str, wei: int) -> Dict[str, int]:
        self._check("send_value", sender)
        self.log.append(("send_value", sender, (to, wei)))
        self.ether[to] = self.ether.get(to, 0) + wei
        return {"status": 1, "gasUsed": 21_000}

    async def call(self, handle: Any, method: str, *args: Any) -> Any:
        return getattr(handle, method)(*args)

    async def close(self) -> None:
        self.closed = True


class FakeVerifier:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: List[Tuple[str, str, str]] = []

    def verify(self, artifact, address, constructor_args_hex=""):
        from Blockchain.errors import VerificationError
        from Blockchain.verifier import VerificationResult

        self.calls.append((artifact.name, address, constructor_args_hex))
        if self.fail:
            return VerificationResult(address, False, error=VerificationError("explorer down"))
        return VerificationResult(address, True, guid="guid-1")


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def loader() -> FakeLoader:
    return FakeLoader()
