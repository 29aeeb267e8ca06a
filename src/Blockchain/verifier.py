# verifier.py
# best-effort source verification on Etherscan; failures come back as a
# result, never as an exception
import os
from dataclasses import dataclass
from typing import Optional
import requests
from eth_abi import encode
import dc_config as Config
from Blockchain.errors import VerificationError

logger = Config.get_logger(os.path.splitext(os.path.basename(__file__))[0])


@dataclass(frozen=True)
class VerificationResult:
    address: str
    ok: bool
    guid: Optional[str] = None
    error: Optional[VerificationError] = None


# abi-encoded constructor arguments, hex without 0x ("" for no arguments)
def encode_constructor_args(types, values):
    if not types:
        return ""
    return encode(list(types), list(values)).hex()


class EtherscanVerifier:
    def __init__(self, api_key, api_url=None, chain_id=None, http=None, timeout=30):
        self.api_key = api_key
        self.api_url = api_url or Config.ETHERSCAN_API_URL
        self.chain_id = chain_id or Config.CHAIN_ID
        self.http = http or requests.Session()
        self.timeout = timeout

    def close(self):
        self.http.close()

    def buildPayload(self, artifact, address, constructor_args_hex):
        optimizer = artifact.compiler.get("optimizer", {})
        return {
            "apikey": self.api_key,
            "module": "contract",
            "action": "verifysourcecode",
            "contractaddress": address,
            "sourceCode": artifact.sourceText,
            "codeformat": "solidity-single-file",
            "contractname": artifact.name,
            "compilerversion": artifact.compiler.get("longVersion", ""),
            "optimizationUsed": "1" if optimizer.get("enabled") else "0",
            "runs": str(optimizer.get("runs", 200)),
            "evmversion": artifact.compiler.get("evmVersion", ""),
            # sic, Etherscan's field name
            "constructorArguements": constructor_args_hex,
        }

    def verify(self, artifact, address, constructor_args_hex="") -> VerificationResult:
        payload = self.buildPayload(artifact, address, constructor_args_hex)
        try:
            resp = self.http.post(
                self.api_url,
                params={"chainid": self.chain_id},
                data=payload,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as err:
            return VerificationResult(address, False, error=VerificationError(
                f"Verification request for {artifact.name} failed: {err}"))

        if not isinstance(body, dict):
            return VerificationResult(address, False, error=VerificationError(
                f"Unexpected response for {artifact.name}: {body!r}"))
        if str(body.get("status")) != "1":
            return VerificationResult(address, False, error=VerificationError(
                f"Etherscan rejected {artifact.name}: {body.get('result') or body.get('message')}"))

        logger.info(f"  ✔ verification of {artifact.name} submitted (guid={body.get('result')})")
        return VerificationResult(address, True, guid=body.get("result"))
