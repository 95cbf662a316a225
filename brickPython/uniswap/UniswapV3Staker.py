import logging
from dataclasses import dataclass

import brickPython.RewardMath as RewardMath
from brickPython.Account import Contract
from brickPython.consts import *
from brickPython.Errors import ValidationError
from brickPython.ReentrancyGuard import external
from brickPython.utilities import checkInputTypes, isZeroAddress

logger = logging.getLogger(__name__)

### @title UniswapV3Staker
### @notice In-memory liquidity mining incentive. Deposited LP-NFTs can be staked in incentives,
### each incentive streams its reward evenly over [startTime, endTime] to the staked positions
### in proportion to their liquidity.


@dataclass(frozen=True)
class IncentiveKey:
    rewardToken: str
    startTime: int
    endTime: int
    refundee: str


@dataclass
class Incentive:
    totalRewardUnclaimed: int
    rewardRate: int
    rewardPerTokenStored: int
    lastUpdateTime: int
    totalLiquidity: int
    numberOfStakes: int


@dataclass
class Deposit:
    owner: str
    numberOfStakes: int


@dataclass
class Stake:
    liquidity: int
    rewardPerTokenPaid: int


class UniswapV3Staker(Contract):

    _stateVars = ("incentives", "deposits", "stakes", "_rewards")

    def __init__(self, name, chain, deployer, nftManager):
        super().__init__(name, chain, deployer)
        self.nftManager = nftManager
        self.incentives = {}
        self.deposits = {}
        # (tokenId, key) => Stake
        self.stakes = {}
        # (rewardToken, owner) => amount
        self._rewards = {}

    ## Views

    def rewards(self, rewardToken, owner):
        return self._rewards.get((rewardToken, owner), 0)

    def getDeposit(self, tokenId):
        return self.deposits.get(tokenId)

    def getRewardInfo(self, key, tokenId):
        stake = self._getStake(key, tokenId)
        incentive = self.incentives[key]
        return RewardMath.calculateEarned(
            stake.liquidity,
            self._rewardPerToken(key, incentive),
            stake.rewardPerTokenPaid,
            0,
        )

    ## Incentives

    @external
    def createIncentive(self, key, reward, sender):
        checkInputTypes(uint256=(reward, key.startTime, key.endTime))
        if reward == 0:
            raise ValidationError(REV_MSG_NZ_UINT, reward=reward)
        if key.startTime >= key.endTime or key.startTime < self.chain.time():
            raise ValidationError(
                REV_MSG_STAKER_TIME, startTime=key.startTime, endTime=key.endTime
            )
        if key in self.incentives:
            raise ValidationError(REV_MSG_STAKER_INCENTIVE_EXISTS)

        # Truncated, the remainder stays unclaimed in the staker
        rewardRate = reward // (key.endTime - key.startTime)
        self.incentives[key] = Incentive(reward, rewardRate, 0, key.startTime, 0, 0)

        self.chain.getContract(key.rewardToken).transferFrom(
            sender, self.address, reward, sender=self.address
        )
        logger.info("Created incentive %s with reward %d", key, reward)
        self.emit("IncentiveCreated", key=key, reward=reward)

    ## Deposits

    ### @notice Deposits a received LP-NFT. `data` may carry an IncentiveKey to stake in
    @external
    def onERC721Received(self, operator, owner, tokenId, data, sender):
        if sender != self.nftManager.address:
            raise ValidationError(REV_MSG_FARM_WRONG_NFT, sender=sender)

        self.deposits[tokenId] = Deposit(owner, 0)
        self.emit("DepositTransferred", tokenId=tokenId, owner=owner)

        if isinstance(data, IncentiveKey):
            self._stakeToken(data, tokenId)

    @external
    def withdrawToken(self, tokenId, to, sender):
        checkInputTypes(accounts=(to))
        deposit = self._getOwnedDeposit(tokenId, sender)
        if deposit.numberOfStakes != 0:
            raise ValidationError(REV_MSG_STAKER_STILL_STAKED, tokenId=tokenId)
        if isZeroAddress(to):
            raise ValidationError(REV_MSG_NZ_ADDR, to=to)

        del self.deposits[tokenId]
        self.emit("DepositTransferred", tokenId=tokenId, owner=ZERO_ADDR)
        self.nftManager.safeTransferFrom(
            self.address, to, tokenId, b"", sender=self.address
        )

    ## Staking

    @external
    def stakeToken(self, key, tokenId, sender):
        self._getOwnedDeposit(tokenId, sender)
        self._stakeToken(key, tokenId)

    @external
    def unstakeToken(self, key, tokenId, sender):
        deposit = self._getOwnedDeposit(tokenId, sender)
        stake = self._getStake(key, tokenId)
        incentive = self._updateIncentive(key)

        reward = RewardMath.calculateEarned(
            stake.liquidity, incentive.rewardPerTokenStored, stake.rewardPerTokenPaid, 0
        )
        incentive.totalRewardUnclaimed -= reward
        incentive.totalLiquidity -= stake.liquidity
        incentive.numberOfStakes -= 1
        deposit.numberOfStakes -= 1
        del self.stakes[(tokenId, key)]

        rewardsKey = (key.rewardToken, deposit.owner)
        self._rewards[rewardsKey] = self._rewards.get(rewardsKey, 0) + reward
        self.emit("TokenUnstaked", tokenId=tokenId, key=key, reward=reward)
        return reward

    ### @notice Transfers accrued rewards to `to`. An amount of 0 claims everything
    @external
    def claimReward(self, rewardToken, to, amountRequested, sender):
        checkInputTypes(accounts=(rewardToken, to), uint256=(amountRequested))
        reward = self.rewards(rewardToken, sender)
        if amountRequested != 0 and amountRequested < reward:
            reward = amountRequested

        self._rewards[(rewardToken, sender)] = self.rewards(rewardToken, sender) - reward
        if reward > 0:
            self.chain.getContract(rewardToken).transfer(to, reward, sender=self.address)
        self.emit("RewardClaimed", to=to, reward=reward)
        return reward

    ## Internal

    def _stakeToken(self, key, tokenId):
        if key not in self.incentives:
            raise ValidationError(REV_MSG_STAKER_UNKNOWN_INCENTIVE)
        if self.chain.time() < key.startTime or self.chain.time() >= key.endTime:
            raise ValidationError(REV_MSG_STAKER_TIME, now=self.chain.time())
        if (tokenId, key) in self.stakes:
            raise ValidationError(REV_MSG_STAKER_ALREADY_STAKED, tokenId=tokenId)

        liquidity = self.nftManager.positions(tokenId).liquidity
        incentive = self._updateIncentive(key)
        incentive.totalLiquidity += liquidity
        incentive.numberOfStakes += 1
        self.deposits[tokenId].numberOfStakes += 1
        self.stakes[(tokenId, key)] = Stake(liquidity, incentive.rewardPerTokenStored)
        self.emit("TokenStaked", tokenId=tokenId, key=key, liquidity=liquidity)

    def _rewardPerToken(self, key, incentive):
        # Nothing accrues outside of the incentive window
        now = min(self.chain.time(), key.endTime)
        elapsed = max(now - incentive.lastUpdateTime, 0)
        return RewardMath.calculateRewardPerToken(
            incentive.rewardPerTokenStored,
            elapsed,
            incentive.rewardRate,
            incentive.totalLiquidity,
        )

    def _updateIncentive(self, key):
        incentive = self.incentives[key]
        incentive.rewardPerTokenStored = self._rewardPerToken(key, incentive)
        incentive.lastUpdateTime = max(
            min(self.chain.time(), key.endTime), incentive.lastUpdateTime
        )
        return incentive

    def _getOwnedDeposit(self, tokenId, sender):
        deposit = self.deposits.get(tokenId)
        if deposit is None or deposit.owner != sender:
            raise ValidationError(REV_MSG_STAKER_NOT_DEPOSITED, tokenId=tokenId)
        return deposit

    def _getStake(self, key, tokenId):
        stake = self.stakes.get((tokenId, key))
        if stake is None:
            raise ValidationError(REV_MSG_STAKER_NOT_STAKED, tokenId=tokenId)
        return stake
