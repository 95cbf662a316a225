from dataclasses import dataclass, replace

from brickPython.Account import Contract
from brickPython.consts import *
from brickPython.Errors import InsufficientBalance, ValidationError
from brickPython.ReentrancyGuard import external
from brickPython.utilities import checkInputTypes, isZeroAddress, mulDiv

### @title NonfungiblePositionManager
### @notice In-memory LP-NFT ledger. Liquidity is not priced: a position holds the token amounts
### it was minted with, and removing liquidity releases a proportional share of them.


@dataclass
class PositionInfo:
    token0: str
    token1: str
    ## the amount of liquidity owned by this position
    liquidity: int
    ## principal still backing the liquidity
    principal0: int
    principal1: int
    ## the tokens owed to the position owner, principal released plus fees
    tokensOwed0: int
    tokensOwed1: int


class NonfungiblePositionManager(Contract):

    _stateVars = ("_positions", "owners", "tokenApprovals", "nextId")

    def __init__(self, name, chain, deployer):
        super().__init__(name, chain, deployer)
        self._positions = {}
        self.owners = {}
        self.tokenApprovals = {}
        self.nextId = 1

    ## Views

    def positions(self, tokenId):
        self._checkExists(tokenId)
        return replace(self._positions[tokenId])

    def ownerOf(self, tokenId):
        self._checkExists(tokenId)
        return self.owners[tokenId]

    def getApproved(self, tokenId):
        self._checkExists(tokenId)
        return self.tokenApprovals.get(tokenId, ZERO_ADDR)

    def balanceOf(self, owner):
        return sum(1 for account in self.owners.values() if account == owner)

    ## Liquidity

    # Hooks on the recipients move the NFT on (e.g. a farm depositing into the staker), so
    # none of the mutators take the reentrancy lock.

    @external
    def mint(self, recipient, token0, token1, liquidity, amount0, amount1, sender):
        checkInputTypes(
            accounts=(recipient, sender), uint128=(liquidity), uint256=(amount0, amount1)
        )
        if isZeroAddress(recipient):
            raise ValidationError(REV_MSG_NZ_ADDR, recipient=recipient)
        if liquidity == 0:
            raise ValidationError(REV_MSG_NZ_UINT, liquidity=liquidity)

        tokenId = self.nextId
        self.nextId += 1
        self._positions[tokenId] = PositionInfo(
            token0.address, token1.address, liquidity, amount0, amount1, 0, 0
        )
        self.owners[tokenId] = recipient

        if amount0 > 0:
            token0.transferFrom(sender, self.address, amount0, sender=self.address)
        if amount1 > 0:
            token1.transferFrom(sender, self.address, amount1, sender=self.address)

        self.emit("Transfer", sender=ZERO_ADDR, recipient=recipient, tokenId=tokenId)
        self.emit(
            "IncreaseLiquidity",
            tokenId=tokenId,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
        )
        return tokenId

    @external
    def decreaseLiquidity(self, tokenId, liquidity, sender):
        checkInputTypes(uint128=(liquidity))
        self._checkAuthorized(tokenId, sender)
        position = self._positions[tokenId]
        if liquidity > position.liquidity:
            raise InsufficientBalance(
                REV_MSG_NPM_LIQUIDITY,
                account=sender,
                amount=liquidity,
                available=position.liquidity,
            )
        if liquidity == 0:
            return 0, 0

        amount0 = mulDiv(position.principal0, liquidity, position.liquidity)
        amount1 = mulDiv(position.principal1, liquidity, position.liquidity)

        position.liquidity -= liquidity
        position.principal0 -= amount0
        position.principal1 -= amount1
        position.tokensOwed0 += amount0
        position.tokensOwed1 += amount1

        self.emit(
            "DecreaseLiquidity",
            tokenId=tokenId,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
        )
        return amount0, amount1

    @external
    def collect(self, tokenId, recipient, sender):
        checkInputTypes(accounts=(recipient))
        self._checkAuthorized(tokenId, sender)
        position = self._positions[tokenId]

        amount0, amount1 = position.tokensOwed0, position.tokensOwed1
        position.tokensOwed0 = 0
        position.tokensOwed1 = 0

        if amount0 > 0:
            self.chain.getContract(position.token0).transfer(
                recipient, amount0, sender=self.address
            )
        if amount1 > 0:
            self.chain.getContract(position.token1).transfer(
                recipient, amount1, sender=self.address
            )

        self.emit(
            "Collect", tokenId=tokenId, recipient=recipient, amount0=amount0, amount1=amount1
        )
        return amount0, amount1

    ### @notice Credits swap fees to a position, paid in by `sender`
    @external
    def accrueFees(self, tokenId, fee0, fee1, sender):
        checkInputTypes(uint256=(fee0, fee1))
        self._checkExists(tokenId)
        position = self._positions[tokenId]

        if fee0 > 0:
            self.chain.getContract(position.token0).transferFrom(
                sender, self.address, fee0, sender=self.address
            )
        if fee1 > 0:
            self.chain.getContract(position.token1).transferFrom(
                sender, self.address, fee1, sender=self.address
            )
        position.tokensOwed0 += fee0
        position.tokensOwed1 += fee1

    ## ERC-721

    @external
    def approve(self, to, tokenId, sender):
        checkInputTypes(accounts=(to))
        self._checkExists(tokenId)
        if self.owners[tokenId] != sender:
            raise ValidationError(REV_MSG_NFT_NOT_OWNER, tokenId=tokenId, sender=sender)
        self.tokenApprovals[tokenId] = to
        self.emit("Approval", owner=sender, approved=to, tokenId=tokenId)

    @external
    def safeTransferFrom(self, owner, to, tokenId, data, sender):
        checkInputTypes(accounts=(owner, to, sender))
        self._checkAuthorized(tokenId, sender)
        if self.owners[tokenId] != owner:
            raise ValidationError(REV_MSG_NFT_NOT_OWNER, tokenId=tokenId, owner=owner)
        if isZeroAddress(to):
            raise ValidationError(REV_MSG_NZ_ADDR, to=to)

        self.tokenApprovals.pop(tokenId, None)
        self.owners[tokenId] = to
        self.emit("Transfer", sender=owner, recipient=to, tokenId=tokenId)

        receiver = self.chain.getContract(to)
        if receiver is not None:
            if not hasattr(receiver, "onERC721Received"):
                raise ValidationError(REV_MSG_NFT_NON_RECEIVER, to=to)
            receiver.onERC721Received(sender, owner, tokenId, data, sender=self.address)

    ## Internal

    def _checkExists(self, tokenId):
        checkInputTypes(uint256=(tokenId))
        if tokenId not in self.owners:
            raise ValidationError(REV_MSG_NFT_UNKNOWN, tokenId=tokenId)

    def _checkAuthorized(self, tokenId, sender):
        self._checkExists(tokenId)
        if sender != self.owners[tokenId] and sender != self.tokenApprovals.get(tokenId):
            raise ValidationError(REV_MSG_NFT_NOT_OWNER, tokenId=tokenId, sender=sender)
