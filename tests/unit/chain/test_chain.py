import pytest
from brickPython.Account import Account, Contract
from brickPython.Chain import Chain
from brickPython.consts import *
from brickPython.ERC20 import ERC20
from brickPython.Errors import ReentrancyError, ValidationError
from brickPython.ReentrancyGuard import nonReentrant
from utils import *

DEPLOYER = Account("DEPLOYER").address
ALICE = Account("ALICE").address


# Calls back into `target` when notified of a balance change
class ReentrantListener(Contract):
    def __init__(self, name, chain, deployer, target):
        super().__init__(name, chain, deployer)
        self.target = target

    def onStakeBalanceChange(self, account, sender):
        self.target.claim(account, sender=DEPLOYER)


class Counter(Contract):

    _stateVars = ("count",)

    def __init__(self, name, chain, deployer):
        super().__init__(name, chain, deployer)
        self.count = 0

    @nonReentrant
    def increment(self, fail=False):
        self.count += 1
        self.emit("Incremented", count=self.count)
        if fail:
            raise ValidationError("Counter: failed")


def test_clock():
    chain = Chain()
    assert chain.time() == GENESIS_TIME

    chain.sleep(DAY)
    assert chain.time() == GENESIS_TIME + DAY

    chain.mine(GENESIS_TIME + 2 * DAY)
    assert chain.time() == GENESIS_TIME + 2 * DAY

    # Mining the current timestamp is a no-op
    chain.mine(chain.time())
    assert chain.time() == GENESIS_TIME + 2 * DAY


def test_clock_rev():
    chain = Chain()
    with reverts(ValidationError):
        chain.sleep(-1)
    with reverts(REV_MSG_TIME_TRAVEL):
        chain.mine(GENESIS_TIME - 1)
    assert chain.time() == GENESIS_TIME


def test_register():
    chain = Chain()
    counter = Counter("Counter", chain, DEPLOYER)

    assert chain.isContract(counter.address)
    assert chain.getContract(counter.address) is counter
    assert not chain.isContract(ALICE)
    assert chain.getContract(ALICE) is None

    # Same name, same address
    with pytest.raises(AssertionError):
        Counter("Counter", chain, DEPLOYER)


def test_transaction_commits():
    chain = Chain()
    counter = Counter("Counter", chain, DEPLOYER)

    counter.increment()
    counter.increment()

    assert counter.count == 2
    assert [e.values["count"] for e in counter.getEvents("Incremented")] == [1, 2]
    assert not chain.inTransaction


def test_transaction_rolls_back():
    chain = Chain()
    counter = Counter("Counter", chain, DEPLOYER)
    counter.increment()

    with reverts("Counter: failed"):
        counter.increment(fail=True)

    assert counter.count == 1
    assert len(counter.getEvents("Incremented")) == 1
    assert not chain.inTransaction
    assert not counter._reentrancyGuard.entered


def test_transaction_rolls_back_all_contracts():
    chain = Chain()
    counterA = Counter("CounterA", chain, DEPLOYER)
    counterB = Counter("CounterB", chain, DEPLOYER)

    with reverts("Counter: failed"):
        with chain.transaction():
            counterA.increment()
            counterB.increment(fail=True)

    assert counterA.count == 0
    assert counterB.count == 0
    assert chain.getEvents("Incremented") == []


def test_transaction_drops_new_contracts():
    chain = Chain()

    with reverts("Counter: failed"):
        with chain.transaction():
            counter = Counter("Counter", chain, DEPLOYER)
            counter.increment(fail=True)

    assert not chain.isContract(counter.address)


def test_reentrancy_rejected(bc):
    farm = bc.pow5InterestFarm
    farm.stake(bc.ALICE, 1000, sender=bc.DEPLOYER)
    bc.chain.sleep(10)

    # Paying out POW1 notifies the listener, which tries to claim again
    listener = ReentrantListener("Listener", bc.chain, bc.DEPLOYER, farm)
    bc.pow1.addBalanceListener(listener.address, sender=bc.DEPLOYER)

    earnedBefore = farm.earned(bc.ALICE)
    with reverts(ReentrancyError):
        farm.claim(bc.ALICE, sender=bc.DEPLOYER)

    assert farm.earned(bc.ALICE) == earnedBefore
    assert bc.pow1.balanceOf(bc.ALICE) == 0
    assert not farm._reentrancyGuard.entered


def test_guard_is_per_contract(bc):
    # A call into one farm holding its lock doesn't block another farm
    with bc.chain.transaction(), bc.pow5InterestFarm._reentrancyGuard:
        bc.pow1LpSftLendFarm.setRewardRate(5, sender=bc.DEPLOYER)
    assert bc.pow1LpSftLendFarm.rewardRate() == 5


def test_nonTransferable_token_guarded_by_own_lock(chain):
    token = ERC20("TOKEN", "TKN", 18, chain, DEPLOYER, transferable=False)
    with reverts(REV_MSG_ERC20_NON_TRANSFERABLE):
        token.transfer(ALICE, 0, sender=DEPLOYER)
