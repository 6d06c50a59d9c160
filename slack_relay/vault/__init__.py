"""Credential encryption at rest."""

from slack_relay.vault.cipher import CredentialCipher, decrypt, derive_key, encrypt

__all__ = ["CredentialCipher", "decrypt", "derive_key", "encrypt"]
