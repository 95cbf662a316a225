from brickPython.AccessControl import Role
from brickPython.Account import Contract
from brickPython.consts import *
from brickPython.Errors import (
    InsufficientAllowance,
    InsufficientBalance,
    ValidationError,
)
from brickPython.ReentrancyGuard import nonReentrant
from brickPython.utilities import checkInputTypes, checkUInt256, isZeroAddress


### @title ERC20
### @notice Fungible balance ledger. Minting and burning is restricted to ERC20_ISSUER_ROLE.
### @dev Non-transferable tokens (LP tokens and DEBT) only move through mint and burn. Balance
### listeners are notified before any balance changes so token-backed farms can checkpoint rewards.
class ERC20(Contract):

    _stateVars = ("balances", "allowances", "_totalSupply", "listeners")

    def __init__(self, name, symbol, decimals, chain, deployer, transferable=True):
        checkInputTypes(string=(symbol), bool=(transferable))
        super().__init__(name, chain, deployer)
        self.symbol = symbol
        self.decimals = decimals
        self.transferable = transferable

        self.balances = {}
        self.allowances = {}
        self._totalSupply = 0
        self.listeners = []

    ## Views

    def totalSupply(self):
        return self._totalSupply

    def balanceOf(self, account):
        return self.balances.get(account, 0)

    def allowance(self, owner, spender):
        return self.allowances.get((owner, spender), 0)

    ## Admin

    @nonReentrant
    def addBalanceListener(self, listener, sender):
        checkInputTypes(accounts=(listener))
        self.accessGate.checkRole(Role.DEFAULT_ADMIN, sender)
        if not self.chain.isContract(listener):
            raise ValidationError(REV_MSG_ERC20_BAD_LISTENER, listener=listener)
        if listener not in self.listeners:
            self.listeners.append(listener)

    ## Issuance

    @nonReentrant
    def mint(self, to, amount, sender):
        checkInputTypes(accounts=(to), uint256=(amount))
        self.accessGate.checkRole(Role.ERC20_ISSUER, sender)
        if isZeroAddress(to):
            raise ValidationError(REV_MSG_NZ_ADDR, to=to)

        self._notifyListeners(to)

        self._totalSupply += amount
        checkUInt256(self._totalSupply)
        self.balances[to] = self.balanceOf(to) + amount
        self.emit("Transfer", sender=ZERO_ADDR, recipient=to, amount=amount)

    @nonReentrant
    def burn(self, account, amount, sender):
        checkInputTypes(accounts=(account), uint256=(amount))
        self.accessGate.checkRole(Role.ERC20_ISSUER, sender)
        if isZeroAddress(account):
            raise ValidationError(REV_MSG_NZ_ADDR, account=account)

        balance = self.balanceOf(account)
        if amount > balance:
            raise InsufficientBalance(
                REV_MSG_ERC20_BURN_EXCEED_BAL, account=account, amount=amount, available=balance
            )

        self._notifyListeners(account)

        self._setBalance(account, balance - amount)
        self._totalSupply -= amount
        self.emit("Transfer", sender=account, recipient=ZERO_ADDR, amount=amount)

    ## Transfers

    @nonReentrant
    def approve(self, spender, amount, sender):
        checkInputTypes(accounts=(spender, sender), uint256=(amount))
        if isZeroAddress(spender):
            raise ValidationError(REV_MSG_NZ_ADDR, spender=spender)
        self.allowances[(sender, spender)] = amount
        self.emit("Approval", owner=sender, spender=spender, amount=amount)
        return True

    @nonReentrant
    def transfer(self, to, amount, sender):
        self._transfer(sender, to, amount)
        return True

    @nonReentrant
    def transferFrom(self, owner, to, amount, sender):
        checkInputTypes(accounts=(owner, sender), uint256=(amount))
        allowed = self.allowance(owner, sender)
        if amount > allowed:
            raise InsufficientAllowance(
                REV_MSG_ERC20_EXCEED_ALLOWANCE,
                owner=owner,
                spender=sender,
                amount=amount,
                available=allowed,
            )
        self.allowances[(owner, sender)] = allowed - amount
        self._transfer(owner, to, amount)
        return True

    def _transfer(self, owner, to, amount):
        checkInputTypes(accounts=(owner, to), uint256=(amount))
        if not self.transferable:
            raise ValidationError(REV_MSG_ERC20_NON_TRANSFERABLE, token=self.symbol)
        if isZeroAddress(to):
            raise ValidationError(REV_MSG_NZ_ADDR, to=to)

        balanceSenderBefore = self.balanceOf(owner)
        if amount > balanceSenderBefore:
            raise InsufficientBalance(
                REV_MSG_ERC20_EXCEED_BAL,
                account=owner,
                amount=amount,
                available=balanceSenderBefore,
            )

        self._notifyListeners(owner)
        if to != owner:
            self._notifyListeners(to)

        self._setBalance(owner, balanceSenderBefore - amount)
        self.balances[to] = self.balanceOf(to) + amount

        # Transfer health check
        assert self._totalSupply >= self.balanceOf(to)
        self.emit("Transfer", sender=owner, recipient=to, amount=amount)

    def _setBalance(self, account, balance):
        # Zero balances are dropped so the table doesn't grow with dead accounts
        if balance == 0:
            self.balances.pop(account, None)
        else:
            self.balances[account] = balance

    def _notifyListeners(self, account):
        for listener in self.listeners:
            self.chain.getContract(listener).onStakeBalanceChange(
                account, sender=self.address
            )
