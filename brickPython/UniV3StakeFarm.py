import logging

from brickPython.AccessControl import Role
from brickPython.Account import Contract
from brickPython.consts import *
from brickPython.Errors import ValidationError
from brickPython.ReentrancyGuard import external, nonReentrant
from brickPython.uniswap.UniswapV3Staker import IncentiveKey
from brickPython.utilities import checkInputTypes

logger = logging.getLogger(__name__)


### @title UniV3StakeFarm
### @notice Stakes LP-NFTs in a single upstream liquidity mining incentive. Entering mints the
### LP-SFT of the position to the caller, exiting burns it and hands back everything the
### position holds: the incentive reward, the liquidity with its fees, and the empty LP-NFT.
### @dev The upstream staker computes the rewards, the farm only mediates deposits.
class UniV3StakeFarm(Contract):

    _stateVars = ("_incentiveKey",)

    def __init__(
        self,
        name,
        chain,
        deployer,
        lpSft,
        nftManager,
        staker,
        lpToken,
        rewardToken,
        incentiveDuration,
    ):
        checkInputTypes(uint256=(incentiveDuration))
        super().__init__(name, chain, deployer)
        self.lpSft = lpSft
        self.nftManager = nftManager
        self.staker = staker
        self.lpToken = lpToken
        self.rewardToken = rewardToken
        self.incentiveDuration = incentiveDuration

        self._incentiveKey = None

    ## Views

    def isInitialized(self):
        return self._incentiveKey is not None

    def incentiveKey(self):
        return self._incentiveKey

    ## Admin

    @nonReentrant
    def createIncentive(self, rewardAmount, sender):
        self.accessGate.checkRole(Role.DEFAULT_ADMIN, sender)
        checkInputTypes(uint256=(rewardAmount))
        if self.isInitialized():
            raise ValidationError(REV_MSG_UNIV3_INITIALIZED)
        if rewardAmount == 0:
            raise ValidationError(REV_MSG_NZ_UINT, rewardAmount=rewardAmount)

        now = self.chain.time()
        self._incentiveKey = IncentiveKey(
            self.rewardToken.address, now, now + self.incentiveDuration, self.address
        )

        self.rewardToken.transferFrom(sender, self.address, rewardAmount, sender=self.address)
        self.rewardToken.approve(self.staker.address, rewardAmount, sender=self.address)
        self.staker.createIncentive(self._incentiveKey, rewardAmount, sender=self.address)

        logger.info("%s: created incentive, reward %d", self.name, rewardAmount)
        self.emit("IncentiveCreated", rewardAmount=rewardAmount)

    ## Positions

    ### @notice Stakes an LP-NFT of the caller. The caller must have approved the farm for it
    @nonReentrant
    def enter(self, tokenId, sender):
        self._checkInitialized()
        checkInputTypes(uint256=(tokenId), accounts=(sender))

        liquidity = self.nftManager.positions(tokenId).liquidity
        self.lpSft.mint(sender, tokenId, self.lpToken, liquidity, sender=self.address)

        self.nftManager.safeTransferFrom(
            sender, self.address, tokenId, b"", sender=self.address
        )
        # Deposit and stake in one transfer
        self.nftManager.safeTransferFrom(
            self.address,
            self.staker.address,
            tokenId,
            self._incentiveKey,
            sender=self.address,
        )

        logger.info("%s: %s entered with LP-NFT %d", self.name, sender, tokenId)
        self.emit("Entered", tokenId=tokenId, owner=sender, liquidity=liquidity)

    ### @notice Unstakes a position of the caller and returns all of its value
    @nonReentrant
    def exit(self, tokenId, sender):
        self._checkInitialized()
        self.lpSft.resolve(tokenId)
        if self.lpSft.ownerOf(tokenId) != sender:
            raise ValidationError(
                REV_MSG_FARM_NOT_OWNER, tokenId=tokenId, sender=sender
            )

        self.lpSft.burn(sender, tokenId, sender=self.address)

        # Only this position's reward is claimed, an amount of 0 would sweep everything
        reward = self.staker.unstakeToken(self._incentiveKey, tokenId, sender=self.address)
        if reward > 0:
            self.staker.claimReward(
                self.rewardToken.address, sender, reward, sender=self.address
            )
        self.staker.withdrawToken(tokenId, self.address, sender=self.address)

        liquidity = self.nftManager.positions(tokenId).liquidity
        self.nftManager.decreaseLiquidity(tokenId, liquidity, sender=self.address)
        amount0, amount1 = self.nftManager.collect(tokenId, sender, sender=self.address)

        # The emptied LP-NFT goes back as a keepsake
        self.nftManager.safeTransferFrom(
            self.address, sender, tokenId, b"", sender=self.address
        )

        logger.info(
            "%s: %s exited LP-NFT %d, reward %d", self.name, sender, tokenId, reward
        )
        self.emit(
            "Exited", tokenId=tokenId, reward=reward, amount0=amount0, amount1=amount1
        )
        return reward, amount0, amount1

    ### @notice Accepts LP-NFTs pulled in by `enter` or returned by the staker
    @external
    def onERC721Received(self, operator, owner, tokenId, data, sender):
        if sender != self.nftManager.address:
            raise ValidationError(REV_MSG_FARM_WRONG_NFT, sender=sender)
        if operator != self.address and owner != self.staker.address:
            raise ValidationError(
                REV_MSG_FARM_DIRECT_TRANSFER, tokenId=tokenId, operator=operator
            )

    def _checkInitialized(self):
        if not self.isInitialized():
            raise ValidationError(REV_MSG_UNIV3_NOT_INITIALIZED)
