# compile.py
# compile all Solidity sources in contracts/ into artifacts/
import json
import os
from pathlib import Path
from solcx import install_solc, set_solc_version, compile_standard, get_solc_version
import dc_config as Config

logger = Config.get_logger(os.path.splitext(os.path.basename(__file__))[0])

# ---- Compiler version ----
SOLC_VER = "0.8.30"
EVM_VERSION = "paris"  # no PUSH0 for older nodes
OPTIMIZER = {"enabled": True, "runs": 200}

CONTRACTS_DIR: Path = Config.CONTRACTS_DIR
ARTIFACTS_DIR: Path = Config.ARTIFACTS_DIR


def standard_input(sol_files):
    sources = {p.name: {"content": p.read_text(encoding="utf-8")} for p in sol_files}
    return {
        "language": "Solidity",
        "sources": sources,
        "settings": {
            "optimizer": OPTIMIZER,
            "evmVersion": EVM_VERSION,
            "outputSelection": {
                "*": {"*": ["abi", "evm.bytecode", "metadata"]}
            },
        },
    }


# one artifact per contract, as read by Blockchain.artifacts
def write_artifacts(res, long_version, artifacts_dir=ARTIFACTS_DIR):
    artifacts_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    index_per_source = {}

    for src_name, contracts in res["contracts"].items():
        index_per_source[src_name] = []
        for contract_name, compiled in contracts.items():
            bytecode = (compiled.get("evm", {}).get("bytecode", {}).get("object", "") or "")
            if bytecode and not bytecode.startswith("0x"):
                bytecode = "0x" + bytecode

            artifact = {
                "contractName": contract_name,
                "sourceName": src_name,
                "abi": compiled.get("abi", []),
                "bytecode": bytecode,
                "compiler": {
                    "version": SOLC_VER,
                    "longVersion": long_version,
                    "evmVersion": EVM_VERSION,
                    "optimizer": OPTIMIZER,
                },
            }
            out_path = artifacts_dir / f"{contract_name}.json"
            out_path.write_text(json.dumps(artifact, indent=2), encoding="utf-8")
            index_per_source[src_name].append(contract_name)
            written += 1
            logger.info(f"  ✔ compiled {contract_name} (from {src_name}) -> {out_path.name}")

    (artifacts_dir / "_index.json").write_text(json.dumps(index_per_source, indent=2), encoding="utf-8")
    return written


def main():
    sol_files = sorted(CONTRACTS_DIR.glob("*.sol"))
    if not sol_files:
        raise SystemExit("No contract to compile...")

    install_solc(SOLC_VER)
    set_solc_version(SOLC_VER)
    # Etherscan wants the full version, e.g. v0.8.30+commit.73712a01
    long_version = f"v{get_solc_version(with_commit_hash=True)}"

    logger.info(f"Compiling with solc {long_version} (EVM={EVM_VERSION})...")
    res = compile_standard(standard_input(sol_files), allow_paths=str(CONTRACTS_DIR))
    written = write_artifacts(res, long_version)
    logger.info(f"Done. Wrote {written} artifact(s) to {ARTIFACTS_DIR}")


if __name__ == "__main__":
    main()
