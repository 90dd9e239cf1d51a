import io
import json

from solsign import codec
from solsign.cli import enter_challenge, run
from solsign.config import Config
from solsign.crypto.derivation import derive_candidates, seed_from
from solsign.crypto.keys import Keypair
from solsign.prompts import ScriptedPrompter
from solsign.session import create_session
from solsign.utils.encoding import decode_base58

from conftest import build_transaction

ABANDON = " ".join(["abandon"] * 11 + ["about"])


def key_file(tmp_path, seed: bytes) -> str:
    keypair = Keypair.from_seed(seed)
    path = tmp_path / f"{keypair.public_key}.json"
    path.write_text(json.dumps(list(seed + keypair.public_key.bytes)))
    return str(path)


def run_cli(config, stdin_text, prompter=None):
    stdout, stderr = io.StringIO(), io.StringIO()
    code = run(config, prompter=prompter, stdin=io.StringIO(stdin_text), stdout=stdout, stderr=stderr)
    return code, stdout.getvalue(), stderr.getvalue()


def test_no_prompt_complete(tmp_path, keypair_a, text_a):
    config = Config(key_files=(key_file(tmp_path, b"\x01" * 32),), no_prompt=True)
    code, out, _ = run_cli(config, text_a + "\n")
    
    assert code == 0
    signature = decode_base58(out.strip())
    tx = codec.decode(text_a)
    assert keypair_a.public_key.verify(signature, codec.message_bytes(tx))


def test_no_prompt_incomplete(tmp_path, keypair_b, text_ab):
    config = Config(key_files=(key_file(tmp_path, b"\x01" * 32),), no_prompt=True)
    code, out, err = run_cli(config, text_ab)
    assert code == 2
    assert out == ""
    assert str(keypair_b.public_key) in err


def test_no_prompt_malformed(tmp_path):
    config = Config(key_files=(key_file(tmp_path, b"\x01" * 32),), no_prompt=True)
    code, _, err = run_cli(config, "***")
    assert code == 1
    assert "Error" in err


def test_no_prompt_empty_input():
    code, _, err = run_cli(Config(no_prompt=True), "")
    assert code == 1


def test_unreadable_key_file(tmp_path):
    config = Config(key_files=(str(tmp_path / "missing.json"),), no_prompt=True)
    code, out, err = run_cli(config, "")
    assert code == 1
    assert "missing.json" in err


def test_interactive_mnemonic_key_and_actions():
    with seed_from(ABANDON, "") as seed:
        candidates = derive_candidates(seed)
    chosen = candidates[2].public_key
    for candidate in candidates:
        candidate.keypair.wipe()
        
    text = codec.encode(build_transaction([chosen]))
    prompter = ScriptedPrompter([ABANDON, "", "2", "", ""])
    stdin = "\n".join([",", "@@@", text, ",", ".", "=", ""]) + "\n"
    
    code, out, _ = run_cli(Config(), stdin, prompter=prompter)
    
    assert code == 0
    lines = out.strip().splitlines()
    assert lines[0] == text
    signature = decode_base58(lines[1])
    assert chosen.verify(signature, codec.message_bytes(codec.decode(text)))
    assert any(f"Added {chosen}" == shown for shown in prompter.shown)
    assert any("Fee payer" in shown for shown in prompter.shown)
    assert any("Error" in shown for shown in prompter.shown)


def test_interactive_partial_then_discard(keypair_a, keypair_b, tmp_path, text_ab):
    config = Config(key_files=(key_file(tmp_path, b"\x01" * 32),))
    prompter = ScriptedPrompter(["", ""])
    stdin = "\n".join([text_ab, "=", "-", "/", "-"]) + "\n"
    
    code, out, _ = run_cli(config, stdin, prompter=prompter)
    
    assert code == 0
    lines = out.strip().splitlines()
    assert len(lines) == 1
    tx = codec.decode(lines[0])
    assert keypair_a.public_key.verify(tx.signatures[0], codec.message_bytes(tx))
    assert any("cannot complete" in shown for shown in prompter.shown)
    assert any(str(keypair_b.public_key) in shown for shown in prompter.shown)
    assert any("No transaction" in shown for shown in prompter.shown)


def test_single_shot_interactive(tmp_path, text_a):
    config = Config(key_files=(key_file(tmp_path, b"\x01" * 32),), single_shot=True)
    prompter = ScriptedPrompter(["", ""])
    code, out, _ = run_cli(config, "\n".join([text_a, "-", text_a, "-"]) + "\n", prompter=prompter)
    assert code == 0
    assert len(out.strip().splitlines()) == 1


def test_enter_challenge_requires_confirmation(keypair_a, text_a):
    prompter = ScriptedPrompter(["one", "two", "S", "S", "S"])
    session = create_session([keypair_a], challenge_prompt=prompter.hidden)
    session.finish_key_entry()
    enter_challenge(session, prompter)
    assert session.has_challenge
    assert "Passwords do not match" in prompter.shown
    assert session.submit_transaction(text_a).signature
