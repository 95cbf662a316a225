from brickPython.consts import REV_MSG_FARM_EXCEED_STAKE
from brickPython.Errors import InsufficientBalance
from brickPython.utilities import checkInputTypes, checkUInt256

### @title StakeSource
### @notice Where a farm reads stake from. The reward accounting in Farm is the same for all of
### them, only the answer to "how much does this account have staked" changes.


# Stake recorded by the farm itself (ERC-20 interest farm)
class InternalStake:

    isExternal = False

    def __init__(self):
        self.balances = {}
        self.total = 0

    def balanceOf(self, account):
        return self.balances.get(account, 0)

    def totalSupply(self):
        return self.total

    def add(self, account, amount):
        checkInputTypes(uint256=(amount))
        self.balances[account] = self.balanceOf(account) + amount
        self.total += amount
        checkUInt256(self.total)

    def subtract(self, account, amount):
        checkInputTypes(uint256=(amount))
        staked = self.balanceOf(account)
        if amount > staked:
            raise InsufficientBalance(
                REV_MSG_FARM_EXCEED_STAKE, account=account, amount=amount, available=staked
            )
        if staked == amount:
            del self.balances[account]
        else:
            self.balances[account] = staked - amount
        self.total -= amount

    def snapshot(self):
        return (dict(self.balances), self.total)

    def restore(self, snapshot):
        balances, total = snapshot
        self.balances = balances
        self.total = total


# Stake is the balance of a fungible token, e.g. the LP token minted for an LP-NFT. The farm keeps
# no counters, it checkpoints rewards from the token's balance listener hook.
class TokenStake:

    isExternal = True

    def __init__(self, token):
        self.token = token

    def balanceOf(self, account):
        return self.token.balanceOf(account)

    def totalSupply(self):
        return self.token.totalSupply()

    def snapshot(self):
        return None

    def restore(self, snapshot):
        pass


# Stake is the LP token balance of the positions whose LP-SFT is held by the custodian (the lend
# farm). Lending or withdrawing moves the LP-SFT, not the LP tokens, so the collateral stays on
# the position account.
class CustodyStake:

    isExternal = True

    def __init__(self, lpSft, lpToken, custodian):
        self.lpSft = lpSft
        self.token = lpToken
        self.custodian = custodian

    def balanceOf(self, account):
        tokenId = self.lpSft.addressToTokenId(account)
        if tokenId == 0 or self.lpSft.ownerOf(tokenId) != self.custodian:
            return 0
        return self.token.balanceOf(account)

    def totalSupply(self):
        return sum(
            self.token.balanceOf(self.lpSft.tokenIdToAddress(tokenId))
            for tokenId in self.lpSft.getTokenIds(self.custodian)
        )

    def snapshot(self):
        return None

    def restore(self, snapshot):
        pass
