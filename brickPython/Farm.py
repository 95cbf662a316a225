import logging
from dataclasses import dataclass

import brickPython.RewardMath as RewardMath
from brickPython.AccessControl import Role
from brickPython.Account import Contract
from brickPython.consts import *
from brickPython.Errors import ValidationError
from brickPython.ReentrancyGuard import external, nonReentrant
from brickPython.utilities import checkInputTypes, isZeroAddress

logger = logging.getLogger(__name__)


@dataclass
class GlobalPoolState:
    ## reward emitted per second, in reward token wei
    rewardRate: int
    ## timestamp of the last accrual
    lastUpdateTime: int
    ## reward per unit of stake accumulated since inception, scaled by 1e18
    rewardPerTokenStored: int


@dataclass
class StakeAccount:
    ## accumulator value as of the account's last update
    rewardPerTokenPaid: int
    ## reward accrued but not yet claimed
    accruedReward: int


### @title Farm
### @notice Reward accrual shared by the interest, LP-NFT stake and LP-SFT lend farms
### @dev The stake itself comes from a StakeSource. Every mutator runs `_updateReward` for the
### affected account before the stake changes, then pays out, then calls other contracts.
class Farm(Contract):

    _stateVars = ("pool", "stakeAccounts")

    def __init__(self, name, chain, deployer, stakeSource, rewardToken, rewardRate):
        checkInputTypes(uint256=(rewardRate))
        super().__init__(name, chain, deployer)
        self.stakeSource = stakeSource
        self.rewardToken = rewardToken

        self.pool = GlobalPoolState(rewardRate, chain.time(), 0)
        self.stakeAccounts = {}

    def _snapshot(self):
        state = super()._snapshot()
        state["_stakeSource"] = self.stakeSource.snapshot()
        return state

    def _restore(self, snapshot):
        super()._restore(snapshot)
        self.stakeSource.restore(snapshot["_stakeSource"])

    ## Views

    def rewardRate(self):
        return self.pool.rewardRate

    def lastUpdateTime(self):
        return self.pool.lastUpdateTime

    def rewardPerTokenStored(self):
        return self.pool.rewardPerTokenStored

    def rewardPerToken(self):
        return RewardMath.calculateRewardPerToken(
            self.pool.rewardPerTokenStored,
            self.chain.time() - self.pool.lastUpdateTime,
            self.pool.rewardRate,
            self.stakeSource.totalSupply(),
        )

    def earned(self, account):
        stakeAccount = self.stakeAccount(account)
        return RewardMath.calculateEarned(
            self.stakeSource.balanceOf(account),
            self.rewardPerToken(),
            stakeAccount.rewardPerTokenPaid,
            stakeAccount.accruedReward,
        )

    def balanceOf(self, account):
        return self.stakeSource.balanceOf(account)

    def totalLiquidity(self):
        return self.stakeSource.totalSupply()

    # Returns a copy, accounts that were never touched read as zero
    def stakeAccount(self, account):
        stakeAccount = self.stakeAccounts.get(account)
        if stakeAccount is None:
            return StakeAccount(0, 0)
        return StakeAccount(stakeAccount.rewardPerTokenPaid, stakeAccount.accruedReward)

    ## Admin

    @nonReentrant
    def setRewardRate(self, rewardRate, sender):
        checkInputTypes(uint256=(rewardRate))
        self.accessGate.checkRole(Role.DEFAULT_ADMIN, sender)

        # Accrue up to now at the old rate
        self._updateReward(None)
        self.pool.rewardRate = rewardRate
        self.emit("RewardRateSet", rewardRate=rewardRate)

    ## Balance listener (token-backed farms)

    ### @notice Called by the stake token before an account's balance changes
    @external
    def onStakeBalanceChange(self, account, sender):
        if not self.stakeSource.isExternal or sender != self.stakeSource.token.address:
            raise ValidationError(REV_MSG_FARM_WRONG_TOKEN, sender=sender)
        self._updateReward(account)

    ## Internal

    ### @notice Accrues the pool up to now and checkpoints `account` (skipped for None)
    def _updateReward(self, account):
        now = self.chain.time()
        assert now >= self.pool.lastUpdateTime, "Time went backwards"

        self.pool.rewardPerTokenStored = RewardMath.calculateRewardPerToken(
            self.pool.rewardPerTokenStored,
            now - self.pool.lastUpdateTime,
            self.pool.rewardRate,
            self.stakeSource.totalSupply(),
        )
        self.pool.lastUpdateTime = now

        if account is None or isZeroAddress(account):
            return

        stakeAccount = self.stakeAccounts.get(account)
        if stakeAccount is None:
            stakeAccount = StakeAccount(0, 0)
            self.stakeAccounts[account] = stakeAccount

        stakeAccount.accruedReward = RewardMath.calculateEarned(
            self.stakeSource.balanceOf(account),
            self.pool.rewardPerTokenStored,
            stakeAccount.rewardPerTokenPaid,
            stakeAccount.accruedReward,
        )
        stakeAccount.rewardPerTokenPaid = self.pool.rewardPerTokenStored

        logger.debug(
            "%s: updated %s, rewardPerToken %d, accrued %d",
            self.name,
            account,
            self.pool.rewardPerTokenStored,
            stakeAccount.accruedReward,
        )

    ### @notice Zeroes the account's accrual and transfers it to `recipient`
    ### @dev Must be preceded by `_updateReward(account)`. No transfer for a zero reward
    def _payReward(self, account, recipient):
        stakeAccount = self.stakeAccounts.get(account)
        reward = stakeAccount.accruedReward if stakeAccount is not None else 0
        if reward == 0:
            return 0

        stakeAccount.accruedReward = 0
        self.rewardToken.transfer(recipient, reward, sender=self.address)
        self.emit("RewardPaid", account=account, recipient=recipient, reward=reward)
        return reward

    # Drops the table entry of an account with nothing staked and nothing owed
    def _releaseAccount(self, account):
        stakeAccount = self.stakeAccounts.get(account)
        if (
            stakeAccount is not None
            and stakeAccount.accruedReward == 0
            and self.stakeSource.balanceOf(account) == 0
        ):
            del self.stakeAccounts[account]
