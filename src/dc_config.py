# global configuration settings
from pathlib import Path
import logging
import os
from dotenv import load_dotenv
from web3 import Web3

# Directory paths
BASE_DIR = Path(__file__).resolve().parents[1]
CONTRACTS_DIR = BASE_DIR / "contracts"
ARTIFACTS_DIR = BASE_DIR / "artifacts"
LOGS_DIR = BASE_DIR / "logs"
LOG_FILE = os.path.join(LOGS_DIR, "DonationCenter.log")

# secrets and per-network values live in .env
load_dotenv(BASE_DIR / ".env")

# Blockchain settings
NETWORK = os.getenv("NETWORK", "local")
INFURA_PROJECT_ID = os.getenv("INFURA_PROJECT_ID", "")
CHAIN_ID = int(os.getenv("CHAIN_ID", "1337"))
# one key, or several separated by commas; index 0 deploys the contracts
PRIVATE_KEY = os.getenv("PRIVATE_KEY", "")
MNEMONIC = os.getenv("MNEMONIC", "")
ACCOUNT_COUNT = int(os.getenv("ACCOUNT_COUNT", "10"))

# Block explorer
ETHERSCAN_API_KEY = os.getenv("ETHERSCAN_API_KEY", "")
ETHERSCAN_API_URL = os.getenv("ETHERSCAN_API_URL", "https://api.etherscan.io/v2/api")

# Token settings
TOKEN_NAME = os.getenv("TOKEN_NAME", "DYB Token")
TOKEN_SYMBOL = os.getenv("TOKEN_SYMBOL", "DYB")
TOKEN_DECIMALS = int(os.getenv("TOKEN_DECIMALS", "18"))

# Scenario settings
RUN_SCENARIO = os.getenv("RUN_SCENARIO", "1") not in ("0", "false", "False", "")
GAS_FUNDING_ETHER = os.getenv("GAS_FUNDING_ETHER", "0.05")
GAS_FUNDING_WEI = Web3.to_wei(GAS_FUNDING_ETHER, "ether")


# endpoint of the selected network
def get_rpc_url():
    url = os.getenv("RPC_URL")
    if url:
        return url
    if NETWORK in ("local", "ganache"):
        return "http://127.0.0.1:7545"
    return f"https://{NETWORK}.infura.io/v3/{INFURA_PROJECT_ID}"


RPC_URL = get_rpc_url()

# logs
LOGS_DIR.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.FileHandler(LOG_FILE, encoding="utf-8"),
        logging.StreamHandler()
    ]
)

# logger
def get_logger(name=None):
    return logging.getLogger(name)
