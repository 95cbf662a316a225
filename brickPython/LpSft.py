import logging

from eth_abi import encode

from brickPython.AccessControl import Role
from brickPython.Account import Contract
from brickPython.consts import *
from brickPython.Errors import UnknownPosition, ValidationError
from brickPython.ReentrancyGuard import external
from brickPython.utilities import (
    checkInputTypes,
    getCreate2Addr,
    isZeroAddress,
)

logger = logging.getLogger(__name__)

# Code hash the per-position accounts are "deployed" with. Any constant works as long as it
# never changes, otherwise position addresses would move.
ACCOUNT_CODE_HASH = "0x" + "b1" * 32


### @title LpSft
### @notice Semi-fungible ledger of staked liquidity positions, and the registry that maps every
### position id to its position account. Each token id has a supply of exactly one.
### @dev All balances of a position (LP tokens, rewards, collateral, debt) are recorded against
### the position account, never against the LP-SFT holder. A position can't be burned while its
### account holds DEBT.
class LpSft(Contract):

    _stateVars = (
        "owners",
        "holdings",
        "operatorApprovals",
        "tokenIdToAccount",
        "accountToTokenId",
        "lpTokens",
    )

    def __init__(self, name, chain, deployer, debtToken):
        super().__init__(name, chain, deployer)
        self.debtToken = debtToken
        self.owners = {}
        self.holdings = {}
        self.operatorApprovals = {}
        self.tokenIdToAccount = {}
        self.accountToTokenId = {}
        # tokenId => LP token address
        self.lpTokens = {}

    ## Position registry

    def computeAccount(self, tokenId):
        checkInputTypes(uint256=(tokenId))
        return getCreate2Addr(
            self.address, encode(["uint256"], [tokenId]).hex(), ACCOUNT_CODE_HASH
        )

    def tokenIdToAddress(self, tokenId):
        checkInputTypes(uint256=(tokenId))
        return self.tokenIdToAccount.get(tokenId, ZERO_ADDR)

    def tokenIdsToAddresses(self, tokenIds):
        return [self.tokenIdToAddress(tokenId) for tokenId in tokenIds]

    def addressToTokenId(self, account):
        checkInputTypes(accounts=(account))
        return self.accountToTokenId.get(account, 0)

    def addressesToTokenIds(self, accounts):
        return [self.addressToTokenId(account) for account in accounts]

    ### @notice Strict lookup of a position account
    ### @dev Raises ValidationError for a zero id and UnknownPosition for an unmapped one
    def resolve(self, tokenId):
        checkInputTypes(uint256=(tokenId))
        if tokenId == 0:
            raise ValidationError(REV_MSG_NZ_TOKEN_ID, tokenId=tokenId)
        account = self.tokenIdToAccount.get(tokenId)
        if account is None:
            raise UnknownPosition(REV_MSG_LPSFT_UNKNOWN, tokenId)
        return account

    def lpTokenOf(self, tokenId):
        self.resolve(tokenId)
        return self.chain.getContract(self.lpTokens[tokenId])

    ## ERC-1155 views

    def balanceOf(self, account, tokenId):
        checkInputTypes(accounts=(account), uint256=(tokenId))
        return 1 if self.owners.get(tokenId) == account else 0

    def ownerOf(self, tokenId):
        checkInputTypes(uint256=(tokenId))
        return self.owners.get(tokenId, ZERO_ADDR)

    def getTokenIds(self, account):
        checkInputTypes(accounts=(account))
        return sorted(self.holdings.get(account, ()))

    def totalSupply(self):
        return len(self.owners)

    def isApprovedForAll(self, owner, operator):
        return self.operatorApprovals.get((owner, operator), False)

    ## Issuance

    # Receiver hooks may call straight back into the ledger (an LP-NFT farm burns the LP-SFT it
    # was just sent), so the ledger's mutators don't take the reentrancy lock.

    @external
    def mint(self, to, tokenId, lpToken, lpAmount, sender, data=b""):
        self.accessGate.checkRole(Role.LPSFT_ISSUER, sender)
        self._mint(to, tokenId, lpToken, lpAmount)
        self.emit(
            "TransferSingle",
            operator=sender,
            sender=ZERO_ADDR,
            recipient=to,
            tokenId=tokenId,
            amount=1,
        )
        self._checkOnERC1155Received(sender, ZERO_ADDR, to, tokenId, data)

    @external
    def mintBatch(self, to, tokenIds, lpToken, lpAmounts, sender, data=b""):
        self.accessGate.checkRole(Role.LPSFT_ISSUER, sender)
        if len(tokenIds) != len(lpAmounts):
            raise ValidationError(
                REV_MSG_ARR_LEN, tokenIds=len(tokenIds), lpAmounts=len(lpAmounts)
            )
        for tokenId, lpAmount in zip(tokenIds, lpAmounts):
            self._mint(to, tokenId, lpToken, lpAmount)
            self.emit(
                "TransferSingle",
                operator=sender,
                sender=ZERO_ADDR,
                recipient=to,
                tokenId=tokenId,
                amount=1,
            )
        for tokenId in tokenIds:
            self._checkOnERC1155Received(sender, ZERO_ADDR, to, tokenId, data)

    @external
    def burn(self, owner, tokenId, sender):
        self.accessGate.checkRole(Role.LPSFT_ISSUER, sender)
        self._burn(owner, tokenId)
        self.emit(
            "TransferSingle",
            operator=sender,
            sender=owner,
            recipient=ZERO_ADDR,
            tokenId=tokenId,
            amount=1,
        )

    @external
    def burnBatch(self, owner, tokenIds, sender):
        self.accessGate.checkRole(Role.LPSFT_ISSUER, sender)
        for tokenId in tokenIds:
            self._burn(owner, tokenId)
            self.emit(
                "TransferSingle",
                operator=sender,
                sender=owner,
                recipient=ZERO_ADDR,
                tokenId=tokenId,
                amount=1,
            )

    ## Transfers

    @external
    def setApprovalForAll(self, operator, approved, sender):
        checkInputTypes(accounts=(operator, sender), bool=(approved))
        if operator == sender:
            raise ValidationError(REV_MSG_LPSFT_SELF_APPROVAL, operator=operator)
        self.operatorApprovals[(sender, operator)] = approved
        self.emit(
            "ApprovalForAll", owner=sender, operator=operator, approved=approved
        )

    @external
    def safeTransferFrom(self, owner, to, tokenId, amount, data, sender):
        checkInputTypes(accounts=(owner, to, sender), uint256=(tokenId, amount))
        if isZeroAddress(to):
            raise ValidationError(REV_MSG_NZ_ADDR, to=to)
        if amount != 1:
            raise ValidationError(REV_MSG_LPSFT_AMOUNT, amount=amount)
        if sender != owner and not self.isApprovedForAll(owner, sender):
            raise ValidationError(
                REV_MSG_LPSFT_NOT_APPROVED, owner=owner, sender=sender
            )
        self.resolve(tokenId)
        if self.owners[tokenId] != owner:
            raise ValidationError(
                REV_MSG_LPSFT_NOT_OWNER, tokenId=tokenId, owner=owner
            )

        self._removeOwner(owner, tokenId)
        self._addOwner(to, tokenId)
        self.emit(
            "TransferSingle",
            operator=sender,
            sender=owner,
            recipient=to,
            tokenId=tokenId,
            amount=1,
        )
        self._checkOnERC1155Received(sender, owner, to, tokenId, data)

    ## Internal

    def _mint(self, to, tokenId, lpToken, lpAmount):
        checkInputTypes(accounts=(to), uint256=(tokenId, lpAmount))
        if tokenId == 0:
            raise ValidationError(REV_MSG_NZ_TOKEN_ID, tokenId=tokenId)
        if isZeroAddress(to):
            raise ValidationError(REV_MSG_NZ_ADDR, to=to)
        if tokenId in self.tokenIdToAccount:
            raise ValidationError(REV_MSG_LPSFT_EXISTS, tokenId=tokenId)

        account = self.computeAccount(tokenId)
        self.tokenIdToAccount[tokenId] = account
        self.accountToTokenId[account] = tokenId
        self.lpTokens[tokenId] = lpToken.address
        self._addOwner(to, tokenId)

        if lpAmount > 0:
            lpToken.mint(account, lpAmount, sender=self.address)

        logger.info("Minted LP-SFT %d to %s, account %s", tokenId, to, account)

    def _burn(self, owner, tokenId):
        checkInputTypes(accounts=(owner), uint256=(tokenId))
        account = self.resolve(tokenId)
        if self.owners[tokenId] != owner:
            raise ValidationError(
                REV_MSG_LPSFT_NOT_OWNER, tokenId=tokenId, owner=owner
            )
        debt = self.debtToken.balanceOf(account)
        if debt > 0:
            raise ValidationError(REV_MSG_LPSFT_DEBT, tokenId=tokenId, debt=debt)

        self._removeOwner(owner, tokenId)
        del self.tokenIdToAccount[tokenId]
        del self.accountToTokenId[account]
        lpToken = self.chain.getContract(self.lpTokens.pop(tokenId))

        lpBalance = lpToken.balanceOf(account)
        if lpBalance > 0:
            lpToken.burn(account, lpBalance, sender=self.address)

        logger.info("Burned LP-SFT %d from %s", tokenId, owner)

    def _addOwner(self, account, tokenId):
        self.owners[tokenId] = account
        self.holdings.setdefault(account, set()).add(tokenId)

    def _removeOwner(self, account, tokenId):
        del self.owners[tokenId]
        holding = self.holdings[account]
        holding.remove(tokenId)
        if not holding:
            del self.holdings[account]

    def _checkOnERC1155Received(self, operator, owner, to, tokenId, data):
        receiver = self.chain.getContract(to)
        if receiver is None:
            return
        if not hasattr(receiver, "onERC1155Received"):
            raise ValidationError(REV_MSG_LPSFT_NON_RECEIVER, to=to)
        receiver.onERC1155Received(
            operator, owner, tokenId, 1, data, sender=self.address
        )
