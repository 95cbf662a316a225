import logging
from enum import Enum

from brickPython.consts import DEFAULT_ADMIN_ROLE, REV_MSG_RENOUNCE_SELF
from brickPython.Errors import AuthorizationError, ValidationError
from brickPython.utilities import checkInputTypes, encodeBytes32String

logger = logging.getLogger(__name__)


class Role(Enum):
    DEFAULT_ADMIN = DEFAULT_ADMIN_ROLE
    ERC20_ISSUER = encodeBytes32String("ERC20_ISSUER_ROLE")
    LPSFT_ISSUER = encodeBytes32String("LPSFT_ISSUER_ROLE")
    ERC20_FARM_OPERATOR = encodeBytes32String("ERC20_FARM_OPERATOR_ROLE")
    LPSFT_FARM_OPERATOR = encodeBytes32String("LPSFT_FARM_OPERATOR_ROLE")
    DEFI_OPERATOR = encodeBytes32String("DEFI_OPERATOR_ROLE")

    @property
    def roleId(self):
        return self.value


### @title AccessGate
### @notice Authorization policy injected into every contract. Each mutator calls `checkRole` with
### the role it needs before touching any state.
class AccessGate:
    def __init__(self, admin):
        checkInputTypes(accounts=(admin))
        self.members = {role: set() for role in Role}
        self.members[Role.DEFAULT_ADMIN].add(admin)

    def hasRole(self, role, account):
        return account in self.members[role]

    def getRoleAdmin(self, role):
        return Role.DEFAULT_ADMIN

    def checkRole(self, role, account):
        if not self.hasRole(role, account):
            raise AuthorizationError(role, account)

    ### @dev Returns True if the role was newly granted
    def grantRole(self, role, account, sender):
        checkInputTypes(accounts=(account, sender))
        self.checkRole(self.getRoleAdmin(role), sender)
        if account in self.members[role]:
            return False
        self.members[role].add(account)
        logger.info("Granted %s to %s", role.name, account)
        return True

    def revokeRole(self, role, account, sender):
        checkInputTypes(accounts=(account, sender))
        self.checkRole(self.getRoleAdmin(role), sender)
        return self._revokeRole(role, account)

    def renounceRole(self, role, account, sender):
        if account != sender:
            raise ValidationError(REV_MSG_RENOUNCE_SELF, account=account, sender=sender)
        return self._revokeRole(role, account)

    def _revokeRole(self, role, account):
        if account not in self.members[role]:
            return False
        self.members[role].remove(account)
        logger.info("Revoked %s from %s", role.name, account)
        return True

    def snapshot(self):
        return {role: set(accounts) for role, accounts in self.members.items()}

    def restore(self, snapshot):
        self.members = snapshot
