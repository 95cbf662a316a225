from web3 import Web3

from brickPython.Errors import ValidationError


# MAX type values
MAX_UINT128 = 2**128 - 1
MAX_UINT256 = 2**256 - 1

ZERO_ADDR = "0x" + "0" * 40


## FULL MATH workarounds


def mulDiv(a, b, c):
    result = (a * b) // c
    checkUInt256(result)
    return result


def checkUInt256(number):
    if type(number) != int:
        raise ValidationError("Not an integer", value=number)
    if number < 0 or number > MAX_UINT256:
        raise ValidationError("OF or UF of UINT256", value=number)


def checkUInt128(number):
    if type(number) != int:
        raise ValidationError("Not an integer", value=number)
    if number < 0 or number > MAX_UINT128:
        raise ValidationError("OF or UF of UINT128", value=number)


def checkString(input):
    if type(input) != str:
        raise ValidationError("Not a string", value=input)


def checkAddress(address):
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValidationError("Not an address", value=address)


def checkBool(input):
    if type(input) != bool:
        raise ValidationError("Not a bool", value=input)


# General checkInput function for all functions that take input parameters
def checkInputTypes(**kwargs):
    if "string" in kwargs:
        loopChecking(kwargs.get("string"), checkString)
    if "accounts" in kwargs:
        loopChecking(kwargs.get("accounts"), checkAddress)
    if "uint256" in kwargs:
        loopChecking(kwargs.get("uint256"), checkUInt256)
    if "uint128" in kwargs:
        loopChecking(kwargs.get("uint128"), checkUInt128)
    if "bool" in kwargs:
        loopChecking(kwargs.get("bool"), checkBool)


def loopChecking(tuple, fcn):
    # Strings are iterable but a single address must be checked as a whole
    if isinstance(tuple, str):
        fcn(tuple)
        return
    try:
        iter(tuple)
    except TypeError:
        # Not iterable
        fcn(tuple)
    else:
        # Iterable
        for item in tuple:
            fcn(item)


def isZeroAddress(address):
    return address is None or int(address, 16) == 0


def addressFromHash(digest):
    # Last 20 bytes of a keccak digest, as CREATE/CREATE2 do
    return Web3.to_checksum_address(digest[-20:])


def cleanHexStr(thing):
    if isinstance(thing, int):
        thing = hex(thing)
    elif not isinstance(thing, str):
        thing = thing.hex()
    return thing[2:] if thing[:2] == "0x" else thing


def getCreate2Addr(sender, saltHex, codeHashHex):
    return addressFromHash(
        Web3.keccak(
            hexstr=("ff" + cleanHexStr(sender) + saltHex + cleanHexStr(codeHashHex))
        )
    )


def encodeBytes32String(text):
    encoded = text.encode("utf-8")
    assert len(encoded) <= 31, "bytes32 string must be less than 32 bytes"
    return encoded + bytes(32 - len(encoded))
