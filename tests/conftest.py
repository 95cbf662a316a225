import pytest
from brickPython.AccessControl import Role
from brickPython.Account import Account
from brickPython.Chain import Chain
from brickPython.config import ProtocolConfig
from brickPython.consts import *
from brickPython.deploy import deployBrickContracts


# A fresh chain per test gives the same isolation as reverting to a snapshot
@pytest.fixture
def chain():
    return Chain()


# Deploy the contracts and set up common test environment
@pytest.fixture
def bc(chain):
    deployer = Account("DEPLOYER").address
    # Defaults rather than the environment so tests are reproducible
    bc = deployBrickContracts(chain, deployer, ProtocolConfig())

    # It's a bit easier to not get mixed up with accounts if they're named
    bc.DEPLOYER = deployer
    bc.ALICE = Account("ALICE").address
    bc.BOB = Account("BOB").address
    bc.CHARLIE = Account("CHARLIE").address
    bc.DENICE = Account("DENICE").address

    # Only needed to fund LP-NFT positions in tests
    bc.pow5.grantRole(Role.ERC20_ISSUER, deployer, sender=deployer)

    return bc


# Interest farm with the rate used in the reward examples
@pytest.fixture
def interestFarm(bc):
    bc.pow5InterestFarm.setRewardRate(100, sender=bc.DEPLOYER)
    return bc.pow5InterestFarm
