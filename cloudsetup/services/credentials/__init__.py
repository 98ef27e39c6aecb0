from .collector import CredentialCollector, CredentialField
from .prompter import Prompter, RichPrompter

__all__ = [
    "CredentialCollector",
    "CredentialField",
    "Prompter",
    "RichPrompter",
]
