# plan.py
# contracts, wiring calls and funding table of the donation system
import dc_config as Config
from SmDeployments.orchestrator import AddressOf, DeploymentSpec, Literal, WiringCall
from SmDeployments.scenario import FundingEntry

REWARD_TOKEN = "DYBToken"
STABLE_TOKEN = "DaiToken"
DONATION_CENTER = "DonationCenter"

# allowance and seed donation of the deployer
DEPLOYER_ALLOWANCE = 100000
DEPLOYER_DONATION = 10000


def deployment_specs():
    return [
        DeploymentSpec(REWARD_TOKEN, (
            Literal(Config.TOKEN_NAME),
            Literal(Config.TOKEN_SYMBOL),
            Literal(Config.TOKEN_DECIMALS),
        )),
        DeploymentSpec(STABLE_TOKEN),
        DeploymentSpec(DONATION_CENTER, (
            AddressOf(STABLE_TOKEN),
            AddressOf(REWARD_TOKEN),
        )),
    ]


def wiring_calls():
    return [
        WiringCall(REWARD_TOKEN, "addLogic", (AddressOf(DONATION_CENTER),)),
        WiringCall(STABLE_TOKEN, "approve", (AddressOf(DONATION_CENTER), Literal(DEPLOYER_ALLOWANCE))),
        WiringCall(DONATION_CENTER, "donate", (Literal(DEPLOYER_DONATION),)),
    ]


# participants 1..5, account 0 is the admin
FUNDING_TABLE = [
    FundingEntry(1, 500),
    FundingEntry(2, 2300),
    FundingEntry(3, 1200),
    FundingEntry(4, 1400),
    FundingEntry(5, 100),
]
