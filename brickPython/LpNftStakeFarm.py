import logging

from brickPython.consts import *
from brickPython.Errors import ValidationError
from brickPython.Farm import Farm
from brickPython.ReentrancyGuard import nonReentrant
from brickPython.StakeSource import TokenStake
from brickPython.utilities import checkInputTypes

logger = logging.getLogger(__name__)


### @title LpNftStakeFarm
### @notice Stake farm for LP-NFTs. Sending an LP-NFT to the farm mints an LP-SFT with the same
### id, backed by LP tokens equal to the position's liquidity. Sending the LP-SFT back pays the
### accrued reward, burns it and returns the LP-NFT.
### @dev The stake is the LP token balance of the position account. The farm never counts stake
### itself, its rewards are checkpointed from the LP token's balance listener hook.
class LpNftStakeFarm(Farm):
    def __init__(
        self, name, chain, deployer, lpSft, nftManager, lpToken, rewardToken, rewardRate
    ):
        super().__init__(
            name, chain, deployer, TokenStake(lpToken), rewardToken, rewardRate
        )
        self.lpSft = lpSft
        self.nftManager = nftManager
        self.lpToken = lpToken

    ## Stake

    ### @notice Mints the LP-SFT for a received LP-NFT to its previous owner
    @nonReentrant
    def onERC721Received(self, operator, owner, tokenId, data, sender):
        if sender != self.nftManager.address:
            raise ValidationError(REV_MSG_FARM_WRONG_NFT, sender=sender)
        checkInputTypes(accounts=(operator, owner), uint256=(tokenId))

        liquidity = self.nftManager.positions(tokenId).liquidity
        self.lpSft.mint(owner, tokenId, self.lpToken, liquidity, sender=self.address)

        logger.info("%s: staked LP-NFT %d for %s", self.name, tokenId, owner)
        self.emit("Staked", tokenId=tokenId, owner=owner, liquidity=liquidity)

    ## Unstake

    ### @notice Pays out, burns the received LP-SFT and returns the LP-NFT to the sender
    @nonReentrant
    def onERC1155Received(self, operator, owner, tokenId, amount, data, sender):
        if sender != self.lpSft.address:
            raise ValidationError(REV_MSG_FARM_WRONG_SFT, sender=sender)
        # Minting straight into the farm would strand the position
        if owner == ZERO_ADDR:
            raise ValidationError(REV_MSG_FARM_DIRECT_TRANSFER, tokenId=tokenId)

        account = self.lpSft.resolve(tokenId)
        if self.lpSft.lpTokenOf(tokenId) is not self.lpToken:
            raise ValidationError(REV_MSG_FARM_WRONG_TOKEN, tokenId=tokenId)

        self._updateReward(account)
        reward = self._payReward(account, owner)

        # The LP token burn checkpoints the account again through the listener hook
        self.lpSft.burn(self.address, tokenId, sender=self.address)
        self._releaseAccount(account)

        self.nftManager.safeTransferFrom(
            self.address, owner, tokenId, b"", sender=self.address
        )

        logger.info("%s: unstaked LP-NFT %d, reward %d", self.name, tokenId, reward)
        self.emit("Unstaked", tokenId=tokenId, owner=owner, reward=reward)

    ## Rewards

    ### @notice Pays the accrued reward of a position to its LP-SFT holder
    @nonReentrant
    def claim(self, tokenId, sender):
        account = self.lpSft.resolve(tokenId)
        if self.lpSft.ownerOf(tokenId) != sender:
            raise ValidationError(
                REV_MSG_FARM_NOT_OWNER, tokenId=tokenId, sender=sender
            )

        self._updateReward(account)
        return self._payReward(account, sender)
