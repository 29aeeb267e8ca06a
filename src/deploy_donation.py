# deploy_donation.py
# one-shot run: deploy tokens and donation center, wire them, replay the
# funding scenario
import asyncio
import os
import dc_config as Config
from Blockchain.artifacts import ArtifactLoader
from Blockchain.chain import open_session
from Blockchain.verifier import EtherscanVerifier
from SmDeployments import plan
from SmDeployments.orchestrator import DeploymentOrchestrator
from SmDeployments.scenario import check_participants, reportDonations, runFundingScenario

logger = Config.get_logger(os.path.splitext(os.path.basename(__file__))[0])


async def deployDonationCenter(session, loader=None, verifier=None, run_scenario=None):
    loader = loader or ArtifactLoader()
    if run_scenario is None:
        run_scenario = Config.RUN_SCENARIO

    accounts = await session.accounts()
    # not enough signers for the funding table: fail before deploying anything
    if run_scenario:
        check_participants(accounts, plan.FUNDING_TABLE)

    orchestrator = DeploymentOrchestrator(session, loader, verifier)
    deployed = await orchestrator.deployAll(plan.deployment_specs())
    await orchestrator.runWiring(plan.wiring_calls())

    if run_scenario:
        await runFundingScenario(
            session,
            accounts,
            plan.FUNDING_TABLE,
            deployed[plan.DONATION_CENTER],
            deployed[plan.STABLE_TOKEN],
        )
        await reportDonations(session, accounts, plan.FUNDING_TABLE, deployed[plan.DONATION_CENTER])
    return deployed


async def main():
    verifier = None
    if Config.ETHERSCAN_API_KEY:
        verifier = EtherscanVerifier(Config.ETHERSCAN_API_KEY)

    try:
        async with open_session() as session:
            deployed = await deployDonationCenter(session, verifier=verifier)
    finally:
        if verifier is not None:
            verifier.close()

    for name, contract in deployed.items():
        logger.info(f"{name}: {contract.address}")
    logger.info("All done.")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
