import logging

from brickPython.AccessControl import Role
from brickPython.consts import *
from brickPython.Errors import ValidationError
from brickPython.Farm import Farm
from brickPython.ReentrancyGuard import external, nonReentrant
from brickPython.StakeSource import CustodyStake
from brickPython.utilities import checkInputTypes

logger = logging.getLogger(__name__)


### @title LpSftLendFarm
### @notice Lend farm for LP-SFTs. The operator lends positions to the farm and withdraws them
### again. While lent, a position earns in proportion to the LP tokens held by its account.
### @dev Rewards are paid to the position account, so they count towards the position's balances
### in the DeFiManager rather than to the operator's wallet.
class LpSftLendFarm(Farm):
    def __init__(
        self, name, chain, deployer, lpSft, lpToken, rewardToken, rewardRate, maxBatchSize
    ):
        checkInputTypes(uint256=(maxBatchSize))
        super().__init__(name, chain, deployer, None, rewardToken, rewardRate)
        self.stakeSource = CustodyStake(lpSft, lpToken, self.address)
        self.lpSft = lpSft
        self.lpToken = lpToken
        self.maxBatchSize = maxBatchSize

    ## Lending

    @nonReentrant
    def lendLpSft(self, tokenId, sender):
        self.accessGate.checkRole(Role.LPSFT_FARM_OPERATOR, sender)
        self._lend(tokenId, sender)

    @nonReentrant
    def lendLpSftBatch(self, tokenIds, sender):
        self.accessGate.checkRole(Role.LPSFT_FARM_OPERATOR, sender)
        self._checkBatchSize(tokenIds)
        for tokenId in tokenIds:
            self._lend(tokenId, sender)

    @nonReentrant
    def withdrawLpSft(self, tokenId, sender):
        self.accessGate.checkRole(Role.LPSFT_FARM_OPERATOR, sender)
        return self._withdraw(tokenId, sender)

    @nonReentrant
    def withdrawLpSftBatch(self, tokenIds, sender):
        self.accessGate.checkRole(Role.LPSFT_FARM_OPERATOR, sender)
        self._checkBatchSize(tokenIds)
        return [self._withdraw(tokenId, sender) for tokenId in tokenIds]

    ### @notice Only accepts LP-SFTs pulled in by the farm itself
    @external
    def onERC1155Received(self, operator, owner, tokenId, amount, data, sender):
        if sender != self.lpSft.address:
            raise ValidationError(REV_MSG_FARM_WRONG_SFT, sender=sender)
        if operator != self.address:
            raise ValidationError(
                REV_MSG_FARM_DIRECT_TRANSFER, tokenId=tokenId, operator=operator
            )

    ## Internal

    def _lend(self, tokenId, operator):
        account = self.lpSft.resolve(tokenId)
        if self.lpSft.lpTokenOf(tokenId) is not self.lpToken:
            raise ValidationError(REV_MSG_FARM_WRONG_TOKEN, tokenId=tokenId)

        # Checkpoint before the position starts counting towards the stake
        self._updateReward(account)

        self.lpSft.safeTransferFrom(
            operator, self.address, tokenId, 1, b"", sender=self.address
        )
        logger.info("%s: lent LP-SFT %d", self.name, tokenId)
        self.emit("Lent", tokenId=tokenId, operator=operator)

    def _withdraw(self, tokenId, operator):
        account = self.lpSft.resolve(tokenId)
        if self.lpSft.ownerOf(tokenId) != self.address:
            raise ValidationError(REV_MSG_FARM_NOT_LENT, tokenId=tokenId)

        self._updateReward(account)
        reward = self._payReward(account, account)

        self.lpSft.safeTransferFrom(
            self.address, operator, tokenId, 1, b"", sender=self.address
        )
        self._releaseAccount(account)

        logger.info("%s: withdrew LP-SFT %d, reward %d", self.name, tokenId, reward)
        self.emit("Withdrawn", tokenId=tokenId, operator=operator, reward=reward)
        return reward

    def _checkBatchSize(self, tokenIds):
        if len(tokenIds) > self.maxBatchSize:
            raise ValidationError(
                REV_MSG_BATCH_SIZE, size=len(tokenIds), maxBatchSize=self.maxBatchSize
            )
