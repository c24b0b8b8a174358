"""
Input validation for credential packaging requests.

All checks run before any workspace is created or external tool spawned.
"""

from typing import Union

from .exceptions import PreconditionViolation

MIN_PASSPHRASE_LENGTH = 5

# Characters that would let a username escape the staging directory
_FORBIDDEN_USERNAME_CHARS = ("/", "\\", "\0")


def validate_username(username: str) -> str:
    """Validate a username for a credential package.

    Args:
        username: The account name to create on the target host

    Returns:
        The validated username

    Raises:
        PreconditionViolation: If the username is empty or not usable as a file name
    """
    if not username:
        raise PreconditionViolation(
            "Username cannot be empty. "
            "Hint: Provide the account name the scanner will log in as."
        )

    for char in _FORBIDDEN_USERNAME_CHARS:
        if char in username:
            raise PreconditionViolation(
                f"Invalid username: {username!r}. "
                "Usernames must not contain path separators or NUL characters."
            )

    if username in (".", ".."):
        raise PreconditionViolation(
            f"Invalid username: {username!r}. "
            "Hint: Use a regular account name."
        )

    return username


def validate_passphrase(passphrase: str) -> str:
    """Validate a key passphrase or account password.

    Args:
        passphrase: The secret to validate

    Returns:
        The validated passphrase

    Raises:
        PreconditionViolation: If the passphrase is shorter than five characters
    """
    if not passphrase or len(passphrase) < MIN_PASSPHRASE_LENGTH:
        raise PreconditionViolation(
            f"Passphrase must be at least {MIN_PASSPHRASE_LENGTH} characters long. "
            "Hint: Shorter passphrases produce unusably weak keys."
        )
    return passphrase


def validate_comment(comment: str) -> str:
    """Validate a key comment.

    Raises:
        PreconditionViolation: If the comment is empty
    """
    if not comment:
        raise PreconditionViolation("Key comment cannot be empty.")
    return comment


def validate_public_key(public_key: Union[str, bytes]) -> bytes:
    """Validate public key material and normalize it to bytes.

    Args:
        public_key: Public key as text or bytes

    Returns:
        The public key as bytes

    Raises:
        PreconditionViolation: If the key is empty
    """
    if isinstance(public_key, str):
        public_key = public_key.encode()

    if not public_key or not public_key.strip():
        raise PreconditionViolation(
            "Public key cannot be empty. "
            "Hint: Use public_key_from_private() to derive it from a generated key."
        )
    return public_key


def validate_maintainer(maintainer: str) -> str:
    """Validate a Debian package maintainer identity.

    Raises:
        PreconditionViolation: If the maintainer is empty
    """
    if not maintainer:
        raise PreconditionViolation(
            "Maintainer cannot be empty for Debian packages. "
            "Hint: Use an e-mail address such as 'ops@example.com'."
        )
    return maintainer
