class VaultError(Exception):
    """Base class for every failure raised by the vault and session layers."""


class KeyDerivationError(VaultError):
    """The KDF rejected its cost parameters. Misconfiguration, never a bad password."""


class AuthenticationError(VaultError):
    """The AEAD tag did not verify: wrong password or tampered vault."""


class MalformedVaultError(VaultError):
    """The vault blob is too short to hold a salt and a nonce."""


class SchemaError(VaultError):
    """The decrypted payload is not a list of {name, secret} objects."""


class PerAccountCodeError(VaultError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"could not generate code for {name!r}: {reason}")
        self.name = name


class SessionInvalidError(VaultError):
    """No session, expired session, or a token that does not match."""


class UnlockFailedError(VaultError):
    # The only message that ever leaves the process for a failed unlock.
    public_message = "Invalid password or corrupted data."

    def __init__(self):
        super().__init__(self.public_message)


class VaultFileError(VaultError):
    """The vault file or the plaintext input could not be read or written."""
