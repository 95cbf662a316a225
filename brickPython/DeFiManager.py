import logging
from enum import Enum

from brickPython.AccessControl import Role
from brickPython.Account import Contract
from brickPython.consts import *
from brickPython.Errors import InsufficientCollateral, ValidationError
from brickPython.ReentrancyGuard import nonReentrant
from brickPython.utilities import checkInputTypes, isZeroAddress

logger = logging.getLogger(__name__)


class Asset(Enum):
    POW1 = "POW1"
    POW5 = "POW5"
    LPPOW1 = "LPPOW1"
    LPPOW5 = "LPPOW5"
    DEBT = "DEBT"
    NOPOW5 = "NOPOW5"


### @title DeFiManager
### @notice Issues POW5 against the collateral held by a position account and takes it back on
### repayment. Debt is recorded as a DEBT token balance on the position account, so it can be
### read like any other balance.
### @dev Collateral is the LPPOW1 balance of the position account. A position can borrow up to
### its collateral, 1:1.
class DeFiManager(Contract):
    def __init__(
        self, name, chain, deployer, lpSft, pow1, pow5, lpPow1, lpPow5, debt, noPow5, maxBatchSize
    ):
        checkInputTypes(uint256=(maxBatchSize))
        super().__init__(name, chain, deployer)
        self.lpSft = lpSft
        self.tokens = {
            Asset.POW1: pow1,
            Asset.POW5: pow5,
            Asset.LPPOW1: lpPow1,
            Asset.LPPOW5: lpPow5,
            Asset.DEBT: debt,
            Asset.NOPOW5: noPow5,
        }
        self.maxBatchSize = maxBatchSize

    ## Balance reads

    def assetBalance(self, asset, tokenId):
        token = self._getToken(asset)
        return token.balanceOf(self.lpSft.resolve(tokenId))

    ### @dev Results are in input order. Any unmapped id fails the whole read
    def assetBalanceBatch(self, asset, tokenIds):
        token = self._getToken(asset)
        if len(tokenIds) > self.maxBatchSize:
            raise ValidationError(
                REV_MSG_BATCH_SIZE, size=len(tokenIds), maxBatchSize=self.maxBatchSize
            )
        accounts = [self.lpSft.resolve(tokenId) for tokenId in tokenIds]
        return [token.balanceOf(account) for account in accounts]

    def pow1Balance(self, tokenId):
        return self.assetBalance(Asset.POW1, tokenId)

    def pow1BalanceBatch(self, tokenIds):
        return self.assetBalanceBatch(Asset.POW1, tokenIds)

    def pow5Balance(self, tokenId):
        return self.assetBalance(Asset.POW5, tokenId)

    def pow5BalanceBatch(self, tokenIds):
        return self.assetBalanceBatch(Asset.POW5, tokenIds)

    def lpPow1Balance(self, tokenId):
        return self.assetBalance(Asset.LPPOW1, tokenId)

    def lpPow1BalanceBatch(self, tokenIds):
        return self.assetBalanceBatch(Asset.LPPOW1, tokenIds)

    def lpPow5Balance(self, tokenId):
        return self.assetBalance(Asset.LPPOW5, tokenId)

    def lpPow5BalanceBatch(self, tokenIds):
        return self.assetBalanceBatch(Asset.LPPOW5, tokenIds)

    def debtBalance(self, tokenId):
        return self.assetBalance(Asset.DEBT, tokenId)

    def debtBalanceBatch(self, tokenIds):
        return self.assetBalanceBatch(Asset.DEBT, tokenIds)

    def noPow5Balance(self, tokenId):
        return self.assetBalance(Asset.NOPOW5, tokenId)

    def noPow5BalanceBatch(self, tokenIds):
        return self.assetBalanceBatch(Asset.NOPOW5, tokenIds)

    def collateralBalance(self, tokenId):
        return self.lpPow1Balance(tokenId)

    def collateralBalanceBatch(self, tokenIds):
        return self.lpPow1BalanceBatch(tokenIds)

    ## Issuance

    ### @notice Borrows `amount` POW5 against a position
    ### @param tokenId The LP-SFT of the position
    ### @param amount The amount of POW5 to issue, also added to the position's debt
    ### @param recipient The account receiving the POW5
    @nonReentrant
    def issue(self, tokenId, amount, recipient, sender):
        self.accessGate.checkRole(Role.DEFI_OPERATOR, sender)
        checkInputTypes(uint256=(tokenId, amount), accounts=(recipient))
        if amount == 0:
            raise ValidationError(REV_MSG_NZ_UINT, amount=amount)
        if isZeroAddress(recipient):
            raise ValidationError(REV_MSG_NZ_ADDR, recipient=recipient)

        account = self.lpSft.resolve(tokenId)
        collateral = self.tokens[Asset.LPPOW1].balanceOf(account)
        debt = self.tokens[Asset.DEBT].balanceOf(account)

        newDebt = debt + amount
        if newDebt > collateral:
            raise InsufficientCollateral(
                REV_MSG_DEFI_COLLATERAL, tokenId, newDebt, collateral
            )

        self.tokens[Asset.POW5].mint(recipient, amount, sender=self.address)
        self.tokens[Asset.DEBT].mint(account, amount, sender=self.address)

        logger.info("Issued %d POW5 against LP-SFT %d to %s", amount, tokenId, recipient)
        self.emit("Issued", tokenId=tokenId, amount=amount, recipient=recipient)

    ### @notice Repays `amount` of a position's debt with POW5 held by the caller
    @nonReentrant
    def repay(self, tokenId, amount, sender):
        self.accessGate.checkRole(Role.DEFI_OPERATOR, sender)
        checkInputTypes(uint256=(tokenId, amount))
        if amount == 0:
            raise ValidationError(REV_MSG_NZ_UINT, amount=amount)

        account = self.lpSft.resolve(tokenId)

        # Over-repayment fails in the DEBT burn and rolls back the POW5 burn with it
        self.tokens[Asset.POW5].burn(sender, amount, sender=self.address)
        self.tokens[Asset.DEBT].burn(account, amount, sender=self.address)

        logger.info("Repaid %d POW5 of LP-SFT %d", amount, tokenId)
        self.emit("Repaid", tokenId=tokenId, amount=amount, payer=sender)

    def issuePow5(self, tokenId, amount, recipient, sender):
        self.issue(tokenId, amount, recipient, sender=sender)

    def repayPow5(self, tokenId, amount, sender):
        self.repay(tokenId, amount, sender=sender)

    def _getToken(self, asset):
        if not isinstance(asset, Asset):
            raise ValidationError(REV_MSG_DEFI_UNKNOWN_ASSET, asset=asset)
        return self.tokens[asset]
