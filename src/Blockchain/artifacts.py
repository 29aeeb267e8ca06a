# artifacts.py
# load compiled contract artifacts (abi, bytecode, source text) by name
import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
import dc_config as Config
from Blockchain.errors import ArtifactLoadError

logger = Config.get_logger(os.path.splitext(os.path.basename(__file__))[0])

UNLINKED_LIB = re.compile(r"__\$\w{34}\$__")


@dataclass(frozen=True)
class ContractArtifact:
    name: str
    abi: list
    bytecode: str
    sourceText: str
    compiler: dict = field(default_factory=dict)

    def constructorInputs(self):
        ctor = next((i for i in self.abi if i.get("type") == "constructor"), None)
        if not ctor:
            return []
        return ctor.get("inputs", [])

    def constructorTypes(self):
        return [i["type"] for i in self.constructorInputs()]


class ArtifactLoader:
    def __init__(self, artifacts_dir: Path = None, contracts_dir: Path = None):
        self.artifacts_dir = Path(artifacts_dir or Config.ARTIFACTS_DIR)
        self.contracts_dir = Path(contracts_dir or Config.CONTRACTS_DIR)
        self._cache = {}

    # artifact written by SmDeployments.compile, one json per contract
    def load(self, name) -> ContractArtifact:
        if name in self._cache:
            return self._cache[name]

        path = self.artifacts_dir / f"{name}.json"
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as err:
            raise ArtifactLoadError(f"No artifact for {name} at {path}") from err
        except json.JSONDecodeError as err:
            raise ArtifactLoadError(f"Artifact {path} is not valid json: {err}") from err

        try:
            abi = data["abi"]
            bytecode = data["bytecode"] or ""
            source_name = data.get("sourceName") or f"{name}.sol"
        except (KeyError, TypeError) as err:
            raise ArtifactLoadError(f"Artifact {path} is missing {err}") from err

        if bytecode and not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode
        if not bytecode or bytecode == "0x":
            raise ArtifactLoadError(f"Artifact {name} has no bytecode")
        if UNLINKED_LIB.search(bytecode):
            placeholders = set(UNLINKED_LIB.findall(bytecode))
            raise ArtifactLoadError(f"{name} has unlinked libraries: {placeholders}")

        source_path = self.contracts_dir / source_name
        try:
            source_text = source_path.read_text(encoding="utf-8")
        except FileNotFoundError as err:
            raise ArtifactLoadError(f"No source text for {name} at {source_path}") from err

        artifact = ContractArtifact(
            name=data.get("contractName") or name,
            abi=abi,
            bytecode=bytecode,
            sourceText=source_text,
            compiler=data.get("compiler", {}),
        )
        self._cache[name] = artifact
        logger.info(f"  ✔ loaded artifact {name} (from {source_name})")
        return artifact
