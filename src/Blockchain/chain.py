# chain.py
# chain session shared by every step of a run: accounts, deployments,
# method-call transactions and plain value transfers
import os
from contextlib import asynccontextmanager
from eth_account import Account
from web3 import AsyncWeb3, AsyncHTTPProvider
import dc_config as Config
from Blockchain.errors import TransactionReverted

logger = Config.get_logger(os.path.splitext(os.path.basename(__file__))[0])


# local signers from PRIVATE_KEY (comma separated) or MNEMONIC
def load_signers(private_key=None, mnemonic=None, count=None):
    private_key = Config.PRIVATE_KEY if private_key is None else private_key
    mnemonic = Config.MNEMONIC if mnemonic is None else mnemonic
    count = count or Config.ACCOUNT_COUNT

    if mnemonic:
        Account.enable_unaudited_hdwallet_features()
        return [
            Account.from_mnemonic(mnemonic, account_path=f"m/44'/60'/0'/0/{i}")
            for i in range(count)
        ]
    keys = [k.strip() for k in private_key.split(",") if k.strip()]
    return [Account.from_key(k) for k in keys]


class ChainSession:
    def __init__(self, w3, signers=None):
        self.w3 = w3
        # address -> local account; empty means the node signs
        self.signers = {s.address: s for s in (signers or [])}
        self._accounts = [s.address for s in (signers or [])]

    # ordered accounts, index 0 deploys
    async def accounts(self):
        if not self._accounts:
            self._accounts = list(await self.w3.eth.accounts)
        return self._accounts

    async def deploy(self, artifact, args, sender):
        Contract = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        ctor = Contract.constructor(*args)
        if sender in self.signers:
            tx = await ctor.build_transaction({
                "from": sender,
                "nonce": await self._nonce(sender),
            })
            tx_hash = await self._sendSigned(tx, sender)
        else:
            tx_hash = await ctor.transact({"from": sender})

        receipt = await self._waitReceipt(tx_hash)
        address = receipt["contractAddress"]
        handle = self.w3.eth.contract(address=address, abi=artifact.abi) if address else None
        return address, handle

    async def transact(self, handle, method, args, sender):
        fn = getattr(handle.functions, method)(*args)
        if sender in self.signers:
            tx = await fn.build_transaction({
                "from": sender,
                "nonce": await self._nonce(sender),
            })
            tx_hash = await self._sendSigned(tx, sender)
        else:
            tx_hash = await fn.transact({"from": sender})
        return await self._waitReceipt(tx_hash)

    async def send_value(self, sender, to, wei):
        tx = {"from": sender, "to": to, "value": wei}
        if sender in self.signers:
            tx.update({
                "gas": 21_000,
                "gasPrice": await self.w3.eth.gas_price,
                "chainId": await self.w3.eth.chain_id,
                "nonce": await self._nonce(sender),
            })
            tx_hash = await self._sendSigned(tx, sender)
        else:
            tx_hash = await self.w3.eth.send_transaction(tx)
        return await self._waitReceipt(tx_hash)

    # read only
    async def call(self, handle, method, *args):
        return await getattr(handle.functions, method)(*args).call()

    async def close(self):
        await self.w3.provider.disconnect()
        logger.info("Chain session closed...")

    async def _nonce(self, address):
        return await self.w3.eth.get_transaction_count(address, "pending")

    async def _sendSigned(self, tx, sender):
        signed = self.signers[sender].sign_transaction(tx)
        return await self.w3.eth.send_raw_transaction(signed.raw_transaction)

    async def _waitReceipt(self, tx_hash):
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] != 1:
            raise TransactionReverted(tx_hash.hex(), receipt)
        return receipt


# scoped acquisition of the connection; the provider is always torn down
@asynccontextmanager
async def open_session(rpc_url=None, signers=None, w3=None):
    rpc_url = rpc_url or Config.RPC_URL
    if w3 is None:
        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
    session = ChainSession(w3, signers=load_signers() if signers is None else signers)
    try:
        if not await w3.is_connected():
            raise ConnectionError(f"Cannot connect to RPC at {rpc_url}")
        logger.info(f"Connected to {rpc_url} (chainId={await w3.eth.chain_id})")
        yield session
    finally:
        await session.close()
