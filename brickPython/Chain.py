import logging
from contextlib import contextmanager
from dataclasses import dataclass, field

from brickPython.consts import GENESIS_TIME, REV_MSG_TIME_TRAVEL
from brickPython.Errors import ValidationError
from brickPython.utilities import checkUInt256

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    ## address of the emitting contract
    address: str
    name: str
    values: dict = field(default_factory=dict)


### @title Chain
### @notice Simulated execution environment. Keeps the clock, the contracts deployed on it and the
### event history. In python there is no revert as in the blockchain, so every external call runs
### inside `transaction()`, which snapshots all contracts and restores them if the call fails.
class Chain:
    def __init__(self, startTime=GENESIS_TIME):
        checkUInt256(startTime)
        self._time = startTime
        self.contracts = {}
        self.events = []
        self._depth = 0

    ## Clock

    def time(self):
        return self._time

    def sleep(self, seconds):
        checkUInt256(seconds)
        self._time += seconds

    def mine(self, timestamp):
        checkUInt256(timestamp)
        if timestamp < self._time:
            raise ValidationError(
                REV_MSG_TIME_TRAVEL, timestamp=timestamp, now=self._time
            )
        self._time = timestamp

    ## Contracts

    def register(self, contract):
        assert contract.address not in self.contracts, "Address already in use"
        self.contracts[contract.address] = contract

    def getContract(self, address):
        return self.contracts.get(address)

    def isContract(self, address):
        return address in self.contracts

    ## Events

    def emit(self, address, name, values):
        self.events.append(Event(address, name, values))

    def getEvents(self, name=None, address=None):
        return [
            event
            for event in self.events
            if (name is None or event.name == name)
            and (address is None or event.address == address)
        ]

    ## Transactions

    @property
    def inTransaction(self):
        return self._depth > 0

    @contextmanager
    def transaction(self):
        # Nested calls (contract to contract) join the outermost transaction
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshots = {
            address: contract._snapshot() for address, contract in self.contracts.items()
        }
        eventCount = len(self.events)
        self._depth = 1
        try:
            yield
        except Exception as e:
            logger.warning("Reverting transaction: %s", e)
            # Contracts deployed during the failed call are dropped as well
            for address in list(self.contracts):
                if address not in snapshots:
                    del self.contracts[address]
            for address, snapshot in snapshots.items():
                self.contracts[address]._restore(snapshot)
            del self.events[eventCount:]
            raise
        finally:
            self._depth = 0
