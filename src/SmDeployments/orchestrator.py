# orchestrator.py
# deploy contracts in caller order, thread deployed addresses into later
# constructors, then issue the wiring calls one by one
import asyncio
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
import dc_config as Config
from Blockchain.errors import DeploymentError, UnresolvedDependency, WiringError
from Blockchain.verifier import encode_constructor_args

logger = Config.get_logger(os.path.splitext(os.path.basename(__file__))[0])


# ---- argument values ----
@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class AddressOf:
    specName: str


@dataclass(frozen=True)
class DeploymentSpec:
    name: str
    constructorArgs: tuple = ()
    dependsOn: frozenset = frozenset()

    # explicit dependencies plus every contract whose address is an argument
    def requires(self):
        refs = {a.specName for a in self.constructorArgs if isinstance(a, AddressOf)}
        return set(self.dependsOn) | refs


@dataclass(frozen=True)
class DeployedContract:
    name: str
    address: str
    handle: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class WiringCall:
    target: str
    method: str
    args: tuple = ()
    senderIndex: int = 0


class DeploymentOrchestrator:
    def __init__(self, session, loader, verifier=None, deployer_index=0):
        self.session = session
        self.loader = loader
        self.verifier = verifier
        self.deployer_index = deployer_index
        # name -> DeployedContract, filled once per spec
        self.deployed = {}

    def resolve(self, arg):
        if isinstance(arg, AddressOf):
            if arg.specName not in self.deployed:
                raise UnresolvedDependency(f"{arg.specName} is not deployed yet")
            return self.deployed[arg.specName].address
        if isinstance(arg, Literal):
            return arg.value
        return arg

    # every dependency must come from an earlier spec, checked before any tx
    def validateOrder(self, specs):
        seen = set(self.deployed)
        for spec in specs:
            if spec.name in seen:
                raise UnresolvedDependency(f"{spec.name} is produced more than once")
            missing = spec.requires() - seen
            if missing:
                raise UnresolvedDependency(
                    f"{spec.name} depends on {sorted(missing)} which is not deployed before it")
            seen.add(spec.name)

    async def deployAll(self, specs, listener: Optional[Callable[[str, str], None]] = None):
        self.validateOrder(specs)
        # fail on a bad artifact before anything reaches the chain
        artifacts = {spec.name: self.loader.load(spec.name) for spec in specs}

        accounts = await self.session.accounts()
        deployer = accounts[self.deployer_index]
        logger.info(f"Attempting to deploy from account: {deployer}")

        for spec in specs:
            artifact = artifacts[spec.name]
            args = [self.resolve(a) for a in spec.constructorArgs]
            logger.info(f"  • {spec.name} ctor args={args}")

            try:
                address, handle = await self.session.deploy(artifact, args, deployer)
            except Exception as err:
                raise DeploymentError(f"Deployment of {spec.name} failed: {err}") from err
            if not address:
                raise DeploymentError(f"Deployment of {spec.name} returned no contract address")

            contract = DeployedContract(spec.name, address, handle)
            self.deployed[spec.name] = contract
            logger.info(f"{spec.name} was deployed at address: {address}")
            if listener is not None:
                listener(spec.name, address)

            await self.verify(artifact, address, args)

        return {spec.name: self.deployed[spec.name] for spec in specs}

    # best effort, an error result is logged and dropped
    async def verify(self, artifact, address, args):
        if self.verifier is None:
            logger.info(f"  ⤷ skip verification of {artifact.name} (no explorer key)")
            return None
        try:
            ctor_hex = encode_constructor_args(artifact.constructorTypes(), args)
        except Exception as err:
            logger.warning(f"  ⚠ cannot encode constructor args of {artifact.name}: {err}")
            return None
        try:
            result = await asyncio.to_thread(self.verifier.verify, artifact, address, ctor_hex)
        except Exception as err:
            logger.warning(f"  ⚠ verification of {artifact.name} failed: {err}")
            return None
        if result.error is not None:
            logger.warning(f"  ⚠ {result.error}")
        return result

    async def runWiring(self, calls):
        accounts = await self.session.accounts()
        for i, call in enumerate(calls):
            if call.target not in self.deployed:
                raise UnresolvedDependency(f"Wiring target {call.target} is not deployed")
            contract = self.deployed[call.target]
            args = [self.resolve(a) for a in call.args]
            sender = accounts[call.senderIndex]
            try:
                receipt = await self.session.transact(contract.handle, call.method, args, sender)
            except Exception as err:
                raise WiringError(
                    f"Wiring call {i} {call.target}.{call.method}{tuple(args)} failed: {err}") from err
            logger.info(
                f"  ✔ {call.target}.{call.method}{tuple(args)} from {sender} "
                f"(gasUsed={receipt['gasUsed']})")
