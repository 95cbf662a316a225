import functools

from brickPython.consts import REV_MSG_REENTRANCY
from brickPython.Errors import ReentrancyError


### @title ReentrancyGuard
### @notice Scoped lock held for the duration of an external call. One instance per contract, so
### calls into two different contracts never block each other. Released on every exit path.
class ReentrancyGuard:
    def __init__(self, owner):
        self.owner = owner
        self.entered = False

    def __enter__(self):
        if self.entered:
            raise ReentrancyError(REV_MSG_REENTRANCY, contract=self.owner)
        self.entered = True
        return self

    def __exit__(self, excType, excValue, traceback):
        self.entered = False
        return False


# Decorator for state mutating entry points. The transaction is the outer scope so that a
# reentrancy failure deep in the call also rolls back everything done before it.
def nonReentrant(fcn):
    @functools.wraps(fcn)
    def wrapper(self, *args, **kwargs):
        with self.chain.transaction(), self._reentrancyGuard:
            return fcn(self, *args, **kwargs)

    return wrapper


# Hooks called back by collaborators during a guarded call (e.g. token balance listeners) can't
# take the lock, but they still must be atomic with the caller.
def external(fcn):
    @functools.wraps(fcn)
    def wrapper(self, *args, **kwargs):
        with self.chain.transaction():
            return fcn(self, *args, **kwargs)

    return wrapper
