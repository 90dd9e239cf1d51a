"""CLI entry point for solsign."""

import atexit
import logging
import sys
from typing import Optional, Sequence, TextIO

from .config import Config, get_config
from .crypto.derivation import derive_candidates, seed_from, select_candidate, wipe_candidates
from .display import describe_transaction
from .exceptions import DerivationError, FileError, MalformedError
from .keyfile import load_keypairs
from .prompts import ConsolePrompter, Prompter
from .session import (
    Complete,
    Failure,
    Incomplete,
    Result,
    SessionState,
    SigningSession,
    create_session,
)

__all__ = ["main", "run", "setup_logging", "enter_mnemonic_keys", "enter_challenge"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INCOMPLETE = 2
EXIT_INTERRUPTED = 130

ACTIONS = """\
  ,  repeat Base64     .  display decoded     -  sign, print Base64
  =  sign, print fee payer signature          /  discard transaction"""


def setup_logging(log_level: str) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _parse_choice(text: Optional[str]) -> Optional[int]:
    if text is None or not text.strip() or text.strip().lower() == "none":
        return None
    try:
        return int(text.strip())
    except ValueError:
        raise DerivationError(f"Not a key index: {text.strip()!r}") from None


def enter_mnemonic_keys(session: SigningSession, prompter: Prompter) -> int:
    """
    Prompt for mnemonic/passphrase pairs until an empty mnemonic is entered.
    
    For each pair the ten candidate keys are shown and the operator picks
    one or none. Invalid input is reported and key entry continues.
    
    Returns:
        Number of keys added
    """
    added = 0
    while True:
        words = prompter.hidden("Mnemonic (empty to finish key entry): ")
        if not words or not words.strip():
            return added
        passphrase = prompter.hidden("Passphrase (empty for none): ")
        if passphrase is None:
            return added
            
        try:
            with seed_from(words, passphrase) as seed:
                candidates = derive_candidates(seed)
        except DerivationError as e:
            prompter.show(f"Error: {e}")
            continue
        finally:
            words = passphrase = None
            
        prompter.show("Candidate keys:")
        for candidate in candidates:
            prompter.show(f"  {candidate}")
            
        try:
            choice = _parse_choice(prompter.line("Key index to use (empty for none): "))
            keypair = select_candidate(candidates, choice)
        except DerivationError as e:
            wipe_candidates(candidates)
            prompter.show(f"Error: {e}")
            continue
            
        if keypair is not None and session.add_key(keypair):
            added += 1
            prompter.show(f"Added {keypair.public_key}")


def enter_challenge(session: SigningSession, prompter: Prompter) -> None:
    """Ask for an optional challenge password, confirmed by repetition."""
    while True:
        secret = prompter.hidden("Challenge password to require before signing (empty for none): ")
        if not secret:
            session.set_challenge(None)
            return
        confirm = prompter.hidden("Repeat challenge password: ")
        if confirm == secret:
            session.set_challenge(secret)
            return
        prompter.show("Passwords do not match")


def _report(result: Result, stdout: TextIO, prompter: Prompter, signature_only: bool) -> None:
    if isinstance(result, Failure):
        prompter.show(f"Error: {result.error}")
        return
    if isinstance(result, Incomplete):
        prompter.show("Still missing signatures from:")
        for signer in result.missing:
            prompter.show(f"  {signer}")
    if signature_only and isinstance(result, Complete):
        print(result.signature, file=stdout, flush=True)
    else:
        print(result.text, file=stdout, flush=True)


def run_interactive(
    session: SigningSession,
    prompter: Prompter,
    stdin: TextIO,
    stdout: TextIO
) -> int:
    """Read transactions and action letters until end of input."""
    current: Optional[str] = None
    
    while session.state is not SessionState.TERMINATED:
        line = stdin.readline()
        if not line:
            session.end_of_input()
            break
        text = line.strip()
        if not text:
            continue
            
        if text not in (",", ".", "-", "=", "/"):
            try:
                inspection = session.inspect(text)
            except MalformedError as e:
                prompter.show(f"Error: {e}")
                continue
            current = text
            prompter.show(
                f"Transaction read: {len(inspection.present)} of {len(inspection.required)} "
                f"signature(s) present, {len(inspection.signable)} available to sign"
            )
            prompter.show(ACTIONS)
            continue
            
        if current is None:
            prompter.show("No transaction; paste a Base64 encoded transaction first")
            continue
            
        if text == ",":
            print(current, file=stdout, flush=True)
        elif text == ".":
            inspection = session.inspect(current)
            prompter.show(describe_transaction(inspection.transaction, session.public_keys))
            if inspection.invalid:
                prompter.show("WARNING: existing signatures fail to verify for: "
                              + ", ".join(map(str, inspection.invalid)))
        elif text == "/":
            current = None
            prompter.show("Transaction discarded")
        elif text == "=" and not session.inspect(current).can_complete:
            prompter.show("Available keys cannot complete this transaction; use - instead")
        else:
            result = session.submit_transaction(current)
            _report(result, stdout, prompter, signature_only=text == "=")
            if not isinstance(result, Failure):
                current = result.text
                
    return EXIT_OK


def run_no_prompt(session: SigningSession, stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    """Sign the single transaction on stdin and print the fee payer signature."""
    text = "".join(stdin.read().split())
    if not text:
        session.end_of_input()
        print("Error: no transaction on standard input", file=stderr)
        return EXIT_ERROR
        
    result = session.submit_transaction(text)
    if isinstance(result, Complete):
        print(result.signature, file=stdout, flush=True)
        return EXIT_OK
    if isinstance(result, Incomplete):
        print("Error: transaction is missing signatures from:", file=stderr)
        for signer in result.missing:
            print(f"  {signer}", file=stderr)
        return EXIT_INCOMPLETE
    print(f"Error: {result.error}", file=stderr)
    return EXIT_ERROR


def run(
    config: Config,
    prompter: Optional[Prompter] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None
) -> int:
    """
    Run solsign with an already parsed configuration.
    
    Returns:
        Process exit code
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    
    try:
        keypairs = load_keypairs(config.key_files)
    except FileError as e:
        print(f"Error: {e}", file=stderr)
        return EXIT_ERROR
        
    prompter = prompter or ConsolePrompter(input_stream=stdin, stream=stderr)
    session = create_session(keypairs, config=config, challenge_prompt=prompter.hidden)
    atexit.register(session.close)
    
    try:
        if config.no_prompt:
            session.finish_key_entry()
            session.set_challenge(None)
            return run_no_prompt(session, stdin, stdout, stderr)
            
        enter_mnemonic_keys(session, prompter)
        session.finish_key_entry()
        if not session.public_keys:
            prompter.show("Warning: no signing keys loaded")
        enter_challenge(session, prompter)
        return run_interactive(session, prompter, stdin, stdout)
    except KeyboardInterrupt:
        print("\nInterrupted", file=stderr)
        return EXIT_INTERRUPTED
    finally:
        session.close()
        atexit.unregister(session.close)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    try:
        config = get_config(argv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
        
    setup_logging(config.normalized_log_level)
    return run(config)
