# scenario.py
# replay the funding table: fund gas, hand out stable tokens, approve and
# donate, one confirmed step at a time
import os
from dataclasses import dataclass
import dc_config as Config
from Blockchain.errors import ScenarioError

logger = Config.get_logger(os.path.splitext(os.path.basename(__file__))[0])

# the deployer/admin account never takes part in the scenario
DEPLOYER_INDEX = 0


@dataclass(frozen=True)
class FundingEntry:
    accountIndex: int
    amount: int


# every entry must name an account in 1..len(accounts)-1
def check_participants(accounts, table):
    for entry in table:
        if not DEPLOYER_INDEX < entry.accountIndex < len(accounts):
            raise ScenarioError(
                f"Account index {entry.accountIndex} is not a scenario participant "
                f"(1..{len(accounts) - 1})")


async def reportDonations(session, accounts, table, donationCenter):
    donations = {}
    for entry in table:
        participant = accounts[entry.accountIndex]
        donations[participant] = await session.call(donationCenter.handle, "donationsOf", participant)
        logger.info(f"  • account {entry.accountIndex} ({participant}) donated {donations[participant]}")
    total = await session.call(donationCenter.handle, "totalDonations")
    logger.info(f"Donation Center holds {total} in total")
    return donations, total


async def runFundingScenario(session, accounts, table, donationCenter, stableToken,
                             gas_funding_wei=None, skip_zero=False):
    if gas_funding_wei is None:
        gas_funding_wei = Config.GAS_FUNDING_WEI
    admin = accounts[DEPLOYER_INDEX]
    logger.info(f"Running funding scenario with {len(table)} entries...")

    for entry in table:
        check_participants(accounts, [entry])
        if skip_zero and entry.amount == 0:
            logger.info(f"  ⤷ skip account {entry.accountIndex} (amount 0)")
            continue

        participant = accounts[entry.accountIndex]
        steps = [
            ("fund gas", admin,
             lambda: session.send_value(admin, participant, gas_funding_wei)),
            ("transfer", admin,
             lambda: session.transact(stableToken.handle, "transfer", [participant, entry.amount], admin)),
            ("approve", participant,
             lambda: session.transact(stableToken.handle, "approve", [donationCenter.address, entry.amount], participant)),
            ("donate", participant,
             lambda: session.transact(donationCenter.handle, "donate", [entry.amount], participant)),
        ]
        for step, sender, submit in steps:
            try:
                await submit()
            except Exception as err:
                raise ScenarioError(
                    f"Step '{step}' for account {entry.accountIndex} ({participant}) failed: {err}") from err
            logger.info(f"  ✔ {step} (amount {entry.amount}) for account {entry.accountIndex} from {sender}")

    logger.info("Funding scenario done.")
