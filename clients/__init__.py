# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_valkey_url,
    get_directory_config,
    get_translation_config,
)
from clients.valkey_client import ValkeyClient
from clients.state_store import StateStore
from clients.directory_client import DirectoryClient, DirectoryError
from clients.translation_client import TranslationClient, TranslationError
