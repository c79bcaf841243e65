"""
Utilbox Backend: Credential Store
==================================

What:  Loads the username/password table once and answers exact-match lookups.
How:   The file is read asynchronously with aiofiles during the application
       lifespan, parsed with the csv module into immutable CredentialEntry
       objects, and wrapped in a CredentialStore snapshot kept on
       `app.state.credential_store`.
Who:   Built by main.lifespan; read by the login and health routes through
       the get_credential_store dependency.

File format:
    username,password
    admin,admin123
    alice,wonderland

Known weakness:
    Passwords are stored and compared in plaintext. Lookup is a linear scan
    with exact equality on both fields (no normalization, no hashing). This
    matches the behavior clients rely on and must not be extended to anything
    that needs real authentication.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

import aiofiles
from fastapi import Request
from pydantic import BaseModel

from utilbox.exceptions import CredentialStoreError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("username", "password")


class CredentialEntry(BaseModel):
    """One loaded username/password pair. Immutable after load."""
    username: str
    password: str

    model_config = {"frozen": True}


def parse_credentials(text: str, source: str = "<memory>") -> List[CredentialEntry]:
    """
    Parse a delimited credential table into entries, preserving file order.

    Args:
        text:   Decoded file contents (header row first)
        source: Name used in error messages and logs

    Raises:
        CredentialStoreError if the header lacks a required column or a row
        is missing a value. Blank lines are skipped; duplicates are kept.
    """
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        raise CredentialStoreError(
            message=f"Credential file {source} is empty",
            context={"source": source},
        )

    # Header names are trimmed; values are kept verbatim
    reader.fieldnames = [name.strip() for name in reader.fieldnames]
    missing = [col for col in REQUIRED_COLUMNS if col not in reader.fieldnames]
    if missing:
        raise CredentialStoreError(
            message=f"Credential file {source} is missing column(s): {', '.join(missing)}",
            context={"source": source, "header": reader.fieldnames},
        )

    entries: List[CredentialEntry] = []
    for row in reader:
        username = row.get("username")
        password = row.get("password")
        if username is None or password is None:
            raise CredentialStoreError(
                message=f"Malformed row at line {reader.line_num} of {source}",
                context={"source": source, "line": reader.line_num},
            )
        entries.append(CredentialEntry(username=username, password=password))
    return entries


class CredentialStore:
    """
    Read-only snapshot of the loaded credential table.

    The entries are held in a tuple and the class exposes no mutators, so the
    snapshot can be shared by every request without synchronization.
    """

    def __init__(self, entries: Sequence[CredentialEntry]):
        self._entries = tuple(entries)

    @classmethod
    async def load(cls, path: Union[str, Path]) -> "CredentialStore":
        """
        Read and parse the credential table at `path`.

        Raises:
            CredentialStoreError on any I/O, decoding or format problem.
        """
        file_path = Path(path)
        # utf-8-sig strips a BOM written by spreadsheet exports
        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8-sig", newline="") as f:
                text = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise CredentialStoreError(
                message=f"Could not read credential file {file_path}: {e}",
                context={"path": str(file_path), "error": type(e).__name__},
            ) from e

        entries = parse_credentials(text, source=str(file_path))
        logger.info("Loaded %d credential entries from %s", len(entries), file_path)
        return cls(entries)

    @property
    def entries(self) -> tuple:
        return self._entries

    def find(self, username: str, password: str) -> Optional[CredentialEntry]:
        """
        Return the first entry matching both fields exactly, or None.

        Case-sensitive, no trimming. With duplicate usernames the earliest
        row in the file wins.
        """
        for entry in self._entries:
            if entry.username == username and entry.password == password:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CredentialEntry]:
        return iter(self._entries)


def get_credential_store(request: Request) -> CredentialStore:
    """
    FastAPI dependency returning the snapshot built during startup.

    Raises:
        CredentialStoreError if the lifespan never stored one (the app is
        being served without its startup phase).
    """
    store = getattr(request.app.state, "credential_store", None)
    if store is None:
        raise CredentialStoreError(message="Credential store is not loaded")
    return store
