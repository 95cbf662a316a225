import logging

from brickPython.AccessControl import Role
from brickPython.consts import *
from brickPython.Errors import ValidationError
from brickPython.Farm import Farm
from brickPython.ReentrancyGuard import nonReentrant
from brickPython.StakeSource import InternalStake
from brickPython.utilities import checkInputTypes, isZeroAddress

logger = logging.getLogger(__name__)


### @title ERC20InterestFarm
### @notice Pays interest on recorded loans. The operator records a loan with `stake` and its
### repayment with `withdraw`, the farm keeps the stake in its own counters.
class ERC20InterestFarm(Farm):
    def __init__(self, name, chain, deployer, rewardToken, rewardRate):
        super().__init__(
            name, chain, deployer, InternalStake(), rewardToken, rewardRate
        )

    @nonReentrant
    def stake(self, account, amount, sender):
        self.accessGate.checkRole(Role.ERC20_FARM_OPERATOR, sender)
        self._checkStakeInput(account, amount)

        self._updateReward(account)
        self.stakeSource.add(account, amount)
        logger.info("%s: recorded loan of %d for %s", self.name, amount, account)
        self.emit("Staked", account=account, amount=amount)

    @nonReentrant
    def withdraw(self, account, amount, sender):
        self.accessGate.checkRole(Role.ERC20_FARM_OPERATOR, sender)
        self._checkStakeInput(account, amount)

        self._updateReward(account)
        self.stakeSource.subtract(account, amount)
        logger.info("%s: recorded repayment of %d for %s", self.name, amount, account)
        self.emit("Withdrawn", account=account, amount=amount)
        self._releaseAccount(account)

    @nonReentrant
    def claim(self, account, sender):
        self.accessGate.checkRole(Role.ERC20_FARM_OPERATOR, sender)
        checkInputTypes(accounts=(account))
        if isZeroAddress(account):
            raise ValidationError(REV_MSG_NZ_ADDR, account=account)

        self._updateReward(account)
        reward = self._payReward(account, account)
        self._releaseAccount(account)
        return reward

    # Aliases used by the lending bureaus
    def recordLoan(self, account, amount, sender):
        self.stake(account, amount, sender=sender)

    def recordRepayment(self, account, amount, sender):
        self.withdraw(account, amount, sender=sender)

    def claimReward(self, account, sender):
        return self.claim(account, sender=sender)

    def _checkStakeInput(self, account, amount):
        checkInputTypes(accounts=(account), uint256=(amount))
        if isZeroAddress(account):
            raise ValidationError(REV_MSG_NZ_ADDR, account=account)
        if amount == 0:
            raise ValidationError(REV_MSG_NZ_UINT, amount=amount)
