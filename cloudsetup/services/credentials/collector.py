"""
Credential Collector - interactive, retryable credential/address prompts.

Each pass prompts for every field that was not pre-seeded, shows the result
with the secret masked and asks the operator to accept. The loop only ends
once every required field has a value and the operator accepted.
Nothing is persisted here.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ...models import MASKED_SECRET
from .prompter import Prompter

PreviewFn = Callable[[Mapping[str, str]], List[Tuple[str, str]]]


@dataclass(frozen=True)
class CredentialField:
    name: str
    label: str
    required: bool = True
    secret: bool = False
    hint: str = ""

    @property
    def prompt_text(self) -> str:
        return f"{self.label} ({self.hint})" if self.hint else self.label


class CredentialCollector:
    def __init__(
        self,
        prompter: Prompter,
        fields: Sequence[CredentialField],
        assume_yes: bool = False,
        intro: str = "",
        preview: Optional[PreviewFn] = None,
    ):
        self._prompter = prompter
        self._fields = list(fields)
        self._assume_yes = assume_yes
        self._intro = intro
        self._preview = preview

    def collect(self, seeded: Optional[Mapping[str, Optional[str]]] = None) -> Dict[str, str]:
        """Run the prompt loop and return the accepted values by field name."""
        values: Dict[str, str] = {
            name: value for name, value in (seeded or {}).items() if value
        }
        seeded_names = set(values)
        to_prompt = [f for f in self._fields if f.name not in seeded_names]

        if not to_prompt:
            logging.debug("All credential fields were pre-seeded, nothing to prompt")
            return values

        attempt = 0
        while True:
            attempt += 1
            if self._intro:
                self._prompter.show(self._intro)

            for credential_field in to_prompt:
                values[credential_field.name] = self._prompter.ask(
                    credential_field.prompt_text, password=credential_field.secret
                )

            self._display(values)

            missing = self.missing_fields(values)
            if missing:
                self._prompter.show(
                    f"Missing required values: {', '.join(missing)}. Please enter the information again."
                )
                logging.debug(f"Credential pass {attempt} incomplete: {missing}")
                continue

            if self._prompter.confirm("Accept these values?", default=self._assume_yes):
                logging.debug(f"Credentials accepted after {attempt} pass(es)")
                return values

            logging.debug(f"Operator asked to re-enter credentials (pass {attempt})")

    def missing_fields(self, values: Mapping[str, str]) -> List[str]:
        return [f.label for f in self._fields if f.required and not values.get(f.name)]

    def _display(self, values: Mapping[str, str]) -> None:
        self._prompter.show("")
        if self._preview:
            for label, value in self._preview(values):
                self._prompter.show(f"{label}: {value}")
        for credential_field in self._fields:
            value = values.get(credential_field.name, "")
            if credential_field.secret:
                value = MASKED_SECRET if value else ""
            self._prompter.show(f"{credential_field.label}: {value}")
        self._prompter.show("")
