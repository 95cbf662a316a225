import copy

from web3 import Web3

from brickPython.AccessControl import AccessGate
from brickPython.ReentrancyGuard import ReentrancyGuard, nonReentrant
from brickPython.utilities import addressFromHash, checkInputTypes, checkString


# Externally owned account. The address is derived from the name so tests and simulations
# get stable addresses between runs.
class Account:
    def __init__(self, name):
        checkString(name)
        self.name = name
        self.address = addressFromHash(Web3.keccak(text=name))

    def __repr__(self):
        return f"<{type(self).__name__} {self.name} {self.address}>"

    def __str__(self):
        return self.address


### @title Contract
### @notice Base class of every simulated contract. Holds the chain it is deployed on, its access
### gate and its reentrancy guard. Subclasses list their storage in `_stateVars` so the chain can
### snapshot and restore them around a transaction.
class Contract(Account):

    _stateVars = ()

    def __init__(self, name, chain, deployer):
        checkInputTypes(accounts=(deployer))
        super().__init__(name)
        self.chain = chain
        self.accessGate = AccessGate(deployer)
        self._reentrancyGuard = ReentrancyGuard(self.address)
        chain.register(self)

    def _snapshot(self):
        state = {name: copy.deepcopy(getattr(self, name)) for name in self._stateVars}
        state["_accessGate"] = self.accessGate.snapshot()
        return state

    def _restore(self, snapshot):
        for name in self._stateVars:
            setattr(self, name, snapshot[name])
        self.accessGate.restore(snapshot["_accessGate"])
        self._reentrancyGuard.entered = False

    def emit(self, name, **values):
        self.chain.emit(self.address, name, values)

    def getEvents(self, name=None):
        return self.chain.getEvents(name, self.address)

    ## Access control

    def hasRole(self, role, account):
        return self.accessGate.hasRole(role, account)

    def getRoleAdmin(self, role):
        return self.accessGate.getRoleAdmin(role)

    @nonReentrant
    def grantRole(self, role, account, sender):
        if self.accessGate.grantRole(role, account, sender):
            self.emit("RoleGranted", role=role, account=account, sender=sender)

    @nonReentrant
    def revokeRole(self, role, account, sender):
        if self.accessGate.revokeRole(role, account, sender):
            self.emit("RoleRevoked", role=role, account=account, sender=sender)

    @nonReentrant
    def renounceRole(self, role, account, sender):
        if self.accessGate.renounceRole(role, account, sender):
            self.emit("RoleRevoked", role=role, account=account, sender=sender)
