"""Runtime configuration for solsign."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .constants import DEFAULT_CHALLENGE_ATTEMPTS, LOG_LEVELS

__all__ = ["Config", "get_config", "build_parser", "USAGE"]

LOG_LEVEL_ENV = "SOLSIGN_LOG_LEVEL"

USAGE = """\
solsign reads Solana transactions in Base64 encoded format from stdin,
displays them, signs them, and writes signed transactions and signatures to
stdout.

On start-up, solsign reads any private key files given on the command line.
It also prompts for mnemonic and passphrase combinations. Collectively these
keys become available to sign transactions.

After key entry, solsign waits for Base64 encoded transactions on standard
input. After each transaction is read, type one of these letters:

  ,  Repeat the Base64 encoded transaction.
  .  Display a decoded version of the transaction.
  -  Sign the transaction and display the Base64 encoded result. The result
     may still be partially signed if not all keys were available.
  =  Sign the transaction and display the Base58 fee payer signature. Only
     available when the available keys complete the transaction.
  /  Discard the current transaction.

With --no-prompt, solsign loads the key files, reads a single transaction
from standard input, signs it, writes the fee payer signature and exits.

Signature slots that are still all zero bytes are filled with signatures
from matching keys, so a transaction can be passed from signer to signer
until it is complete.
"""


@dataclass(frozen=True)
class Config:
    """Application configuration."""
    
    # Keys
    key_files: Tuple[Path, ...] = ()
    
    # Workflow
    no_prompt: bool = False
    single_shot: bool = False
    challenge_attempts: int = DEFAULT_CHALLENGE_ATTEMPTS
    
    # Logging
    log_level: str = "WARNING"
    
    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.challenge_attempts < 1:
            raise ValueError(
                f"challenge_attempts must be at least 1, got {self.challenge_attempts}"
            )
            
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}, got {self.log_level}")
            
    @property
    def normalized_log_level(self) -> str:
        """Return normalized uppercase log level."""
        return self.log_level.upper()
        
    @property
    def is_single_shot(self) -> bool:
        """Whether the session ends after one transaction."""
        return self.single_shot or self.no_prompt


def build_parser() -> argparse.ArgumentParser:
    """Command line parser."""
    parser = argparse.ArgumentParser(
        prog="solsign",
        description="Offline signer for Base64 encoded Solana transactions",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    
    parser.add_argument(
        "key_files",
        metavar="KEY_FILE",
        nargs="*",
        type=Path,
        help="Solana CLI keypair file (JSON array of 64 bytes)",
    )
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="Do not prompt; sign one transaction from stdin and print the fee payer signature",
    )
    parser.add_argument(
        "--single",
        action="store_true",
        dest="single_shot",
        help="Exit after processing one transaction",
    )
    parser.add_argument(
        "--challenge-attempts",
        type=int,
        default=DEFAULT_CHALLENGE_ATTEMPTS,
        help=f"Attempts allowed for the challenge password (default: {DEFAULT_CHALLENGE_ATTEMPTS})",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "WARNING"),
        type=str.upper,
        choices=sorted(LOG_LEVELS),
        help=f"Logging level (default: WARNING, or ${LOG_LEVEL_ENV})",
    )
    return parser


def get_config(argv: Optional[Sequence[str]] = None) -> Config:
    """
    Parse command line arguments and return configuration.
    
    Raises:
        ValueError: If the parsed values are inconsistent
        SystemExit: On --help or unknown flags (argparse behaviour)
    """
    args = build_parser().parse_args(argv)
    
    return Config(
        key_files=tuple(args.key_files),
        no_prompt=args.no_prompt,
        single_shot=args.single_shot,
        challenge_attempts=args.challenge_attempts,
        log_level=args.log_level,
    )
